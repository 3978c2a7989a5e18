"""
Console chat loop for trying the dialogue pipeline locally.
"""

import asyncio
import uuid

from pydantic import ValidationError

from shopchat import config
from shopchat.database import InMemoryOrderLookup, InMemoryProductSearch, load_catalog
from shopchat.models.schemas import ChatRequest
from shopchat.services.chat_service import ChatService, InvalidMessageError
from shopchat.services.dialogue_service import create_dialogue_router
from shopchat.services.responder_service import ResponderError
from shopchat.utils.prompts import load_prompts
from shopchat.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)
MESSAGES = load_prompts()["messages"]

EXIT_COMMANDS = ("exit", "quit")


async def run_chatbot() -> None:
    """Initializes the router and runs the console loop."""
    settings = config.get_settings()
    configure_logging(settings.log_level, use_structured=settings.structured_logging)

    products, orders = load_catalog(settings.catalog_path)
    router = create_dialogue_router(
        local_product_search=InMemoryProductSearch(products),
        local_order_lookup=InMemoryOrderLookup(orders),
    )
    chat = ChatService(router)
    session_id = str(uuid.uuid4())

    print("\n--- Aninka Fashion Chat ---")
    print("Ketik 'exit' untuk keluar.")

    while True:
        message = await asyncio.to_thread(input, "\nAnda: ")
        if message.strip().lower() in EXIT_COMMANDS:
            print("Terima kasih, sampai jumpa!")
            break

        try:
            request = ChatRequest(message=message, session_id=session_id)
        except ValidationError:
            logger.warning("console_message_rejected", length=len(message))
            print(f"\nBot: {MESSAGES['message_too_long']}")
            continue

        try:
            reply = await chat.submit(request)
        except InvalidMessageError:
            continue
        except ResponderError:
            logger.error("console_turn_failed", exc_info=True)
            print("\nBot: Maaf, terjadi kesalahan. Silakan coba lagi.")
            continue

        print(f"\nBot: {reply.response}")


def main() -> None:
    asyncio.run(run_chatbot())


if __name__ == "__main__":
    main()
