"""Entry point for the mentor-chat server."""

from mentor_chat.config import get_host, get_port, get_transport
from mentor_chat.server import create_server


def main() -> None:
    """Run the mentor-chat server over HTTP (default) or stdio."""
    server = create_server()
    if get_transport() == "stdio":
        server.run(transport="stdio")
    else:
        server.run(transport="http", host=get_host(), port=get_port())


if __name__ == "__main__":
    main()
