"""Prompt context: auxiliary content and the prompt assembler."""
