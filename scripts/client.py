#!/usr/bin/env python3
"""
Interactive Test Client for LRU-KV

A simple command-line client for manually testing the LRU-KV server.
Typed commands are sent as RESP arrays, the same way redis-cli sends them.

Usage:
    python scripts/client.py                  # Connect to localhost:6379
    python scripts/client.py --host 1.2.3.4   # Connect to specific host
    python scripts/client.py --port 6380      # Connect to specific port

Commands:
    SET <key> <value>         - Store a key-value pair
    GET <key>                 - Retrieve a value
    DEL <key> [key ...]       - Delete keys
    DBSIZE                    - Number of stored keys
    FLUSHDB                   - Remove every key
    SET_MAX_LRU_SIZE <n>      - Change the cache capacity
    PING / INFO               - Health checks
    QUIT                      - Close connection
    help                      - Show this help
    exit                      - Exit client
"""

import argparse
import shlex
import socket
import sys

from lrukv.protocol.parser import ProtocolParser

# Enable command history with arrow keys (works on Unix systems)
try:
    import readline  # noqa: F401
except ImportError:
    pass  # readline not available on Windows by default


class LRUKVClient:
    """Simple TCP client for LRU-KV."""

    def __init__(self, host: str, port: int, timeout: float = 5.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.socket = None
        self.parser = ProtocolParser()

    def connect(self) -> bool:
        """Connect to the server."""
        try:
            self.socket = socket.create_connection((self.host, self.port), self.timeout)
            return True
        except OSError as e:
            print(f"Connection error: {e}")
            return False

    def disconnect(self):
        """Disconnect from the server."""
        if self.socket:
            try:
                self.socket.close()
            except OSError:
                pass
            self.socket = None

    def send_command(self, command: str) -> str:
        """Send a command and receive the reply line."""
        if not self.socket:
            return "ERROR: Not connected"

        try:
            self.socket.sendall(self.parser.encode_request(*shlex.split(command)))

            response = b''
            while not response.endswith(b'\r\n'):
                chunk = self.socket.recv(4096)
                if not chunk:
                    return "ERROR: Connection closed by server"
                response += chunk

            return response.decode('utf-8').rstrip('\r\n')

        except socket.timeout:
            return "ERROR: Request timed out"
        except (OSError, ValueError) as e:
            return f"ERROR: {e}"

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()


def print_help():
    """Print help message."""
    print("""
LRU-KV Commands:
----------------
  SET <key> <value>         Store a key-value pair
  GET <key>                 Retrieve the value for a key
  DEL <key> [key ...]       Delete keys (returns number removed)
  DBSIZE                    Number of keys stored
  FLUSHDB                   Remove every key
  SET_MAX_LRU_SIZE <n>      Change the cache capacity
  PING                      Health check
  INFO                      Server acknowledgement
  QUIT                      Close connection and exit

Client Commands:
----------------
  help                      Show this help message
  exit                      Exit the client
  reconnect                 Reconnect to the server
  status                    Show connection status

Examples:
---------
  SET mykey myvalue         Store "myvalue" under "mykey"
  SET greeting "hi there"   Quote values containing spaces
  GET mykey                 Get value for "mykey"
  SET_MAX_LRU_SIZE 2        Keep at most two keys
""")


def main():
    parser = argparse.ArgumentParser(
        description="Interactive test client for LRU-KV"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="localhost",
        help="Server host (default: localhost)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=6379,
        help="Server port (default: 6379)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="Socket timeout in seconds (default: 5.0)"
    )

    args = parser.parse_args()

    print("LRU-KV Client")
    print("=============")
    print(f"Connecting to {args.host}:{args.port}...")

    client = LRUKVClient(args.host, args.port, args.timeout)

    if not client.connect():
        print("Failed to connect. Is the server running?")
        print(f"  Try: python -m lrukv.server --port {args.port}")
        sys.exit(1)

    print("Connected! Type 'help' for commands.\n")

    try:
        while True:
            try:
                command = input(">>> ").strip()

                if not command:
                    continue

                lower_cmd = command.lower()

                if lower_cmd == "help":
                    print_help()
                    continue

                if lower_cmd == "exit":
                    print(client.send_command("QUIT"))
                    print("Goodbye!")
                    break

                if lower_cmd == "reconnect":
                    client.disconnect()
                    if client.connect():
                        print("Reconnected!")
                    else:
                        print("Reconnection failed.")
                    continue

                if lower_cmd == "status":
                    status = "Connected" if client.socket else "Disconnected"
                    print(f"Status: {status}")
                    print(f"Server: {args.host}:{args.port}")
                    continue

                print(client.send_command(command))

                if lower_cmd == "quit":
                    print("Goodbye!")
                    break

            except EOFError:
                print("\nGoodbye!")
                break

    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")
    finally:
        client.disconnect()


if __name__ == "__main__":
    main()
