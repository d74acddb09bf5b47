import os
from dotenv import load_dotenv

from friday_assistant.agent import Assistant
from friday_assistant.clients.groq import GroqClient
from friday_assistant.sessions import JsonFileSessionStore
from friday_assistant.tools import GetContactsTool, TavilySearchTool, WeatherTool
from friday_assistant.tools.registry import ToolRegistry

# Load environment variables (API keys)
load_dotenv()


def main():
    # 1. Initialize the LLM Client
    api_key = os.getenv("GROQ_API_KEY")
    if not api_key:
        print("Please set GROQ_API_KEY in .env")
        return

    client = GroqClient(api_key=api_key)

    # 2. Pick the tools the assistant may call and freeze the registry
    registry = ToolRegistry.from_tools([
        WeatherTool(),
        GetContactsTool("contacts.yaml"),
        TavilySearchTool(os.getenv("TAVILY_API_KEY")),
    ]).freeze()

    # 3. Initialize the Assistant; sessions are kept on disk between runs
    assistant = Assistant(
        client=client,
        registry=registry,
        store=JsonFileSessionStore(".friday/sessions"),
        timezone="Europe/London",
    )

    # 4. Run two turns on the same session
    session_id = assistant.new_session()
    for question in ("What's the weather in London?", "And in Paris?"):
        result = assistant.run_turn(question, session_id=session_id)
        print(f"You: {question}")
        print(f"AI: {result.content} ({result.rounds} tool round(s))")

    print(f"History has {len(assistant.history(session_id))} messages")


if __name__ == "__main__":
    main()
