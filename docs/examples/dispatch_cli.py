import asyncio
import json

from dotenv import load_dotenv

from tool_bridge import BridgeConfig, ConfigurationError, ToolDispatcher, setup_logging

# Load environment variables
load_dotenv()


async def main() -> None:
    """
    Run tool calls typed on the command line through the bridge.
    """
    print("Welcome to the tool bridge console!")
    setup_logging()

    try:
        config = BridgeConfig.from_env()
    except ConfigurationError as e:
        print(f"Error: {e}")
        return

    async with ToolDispatcher(config) as dispatcher:
        print("Available tools: " + ", ".join(dispatcher.tool_names))
        print("\nEnter '<tool name> <json arguments>'. Type 'exit' or 'quit' to stop.")
        while True:
            user_input = input("\nTool: ").strip()
            if user_input.lower() in ["exit", "quit"]:
                print("Goodbye!")
                break

            if not user_input:
                continue

            name, _, arguments = user_input.partition(" ")
            envelope = await dispatcher.dispatch({"name": name, "arguments": arguments.strip() or None})
            print(json.dumps(envelope.to_dict(), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    asyncio.run(main())
