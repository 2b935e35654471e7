"""Run the gateway: python cli.py [--debug] [--bind ADDRESS] [--port PORT]"""

from cli.main import main

if __name__ == "__main__":
    main()
