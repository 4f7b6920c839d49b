import dotenv

from fathom_mcp_server.server import main

dotenv.load_dotenv()


if __name__ == "__main__":
    main()
