"""
PayPal MCP server wiring and process entry point
"""

import asyncio
import logging
import signal
from typing import Optional, TextIO

import httpx
from pydantic import ValidationError

from .auth import PayPalTokenProvider
from .consumers import MCPStdioConsumer, open_stdin_reader
from .domain_registry import MCPDomainRegistry
from .domains.payments import PayPalClient, PayPalProvider
from .logging_config import configure_logging
from .protocol import MCPProtocolHandler
from .settings import PayPalSettings

logger = logging.getLogger(__name__)

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class PayPalMCPServer:
    """Builds the tool registry and serves it over stdio"""

    def __init__(self, settings: PayPalSettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.token_provider = PayPalTokenProvider(
            settings.client_id,
            settings.client_secret.get_secret_value(),
            settings.api_base,
            transport=transport,
        )
        client = PayPalClient(settings.api_base, transport=transport)
        self.registry = MCPDomainRegistry({
            'payments': [PayPalProvider(client, self.token_provider)],
        })
        self.protocol_handler = MCPProtocolHandler(self.registry)
        self.consumer: Optional[MCPStdioConsumer] = None

    async def run(self, reader: Optional[asyncio.StreamReader] = None, writer: Optional[TextIO] = None):
        """Serve until stdin closes or a stop signal arrives"""
        if reader is None:
            reader = await open_stdin_reader()
        self.consumer = MCPStdioConsumer(self.protocol_handler, reader, writer)

        loop = asyncio.get_running_loop()
        stop_event = asyncio.Event()
        installed = []
        for sig in STOP_SIGNALS:
            try:
                loop.add_signal_handler(sig, stop_event.set)
                installed.append(sig)
            except (NotImplementedError, RuntimeError, ValueError):
                # not supported on this platform or outside the main thread
                pass

        run_task = asyncio.create_task(self.consumer.run())
        stop_task = asyncio.create_task(stop_event.wait())
        logger.info("PayPal MCP server running on stdio")

        try:
            done, _ = await asyncio.wait({run_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
            if stop_task in done:
                logger.info("Stop signal received, closing transport")
                await self.close()
                run_task.cancel()
                await asyncio.gather(run_task, return_exceptions=True)
            else:
                stop_task.cancel()
                run_task.result()
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)

    async def close(self):
        if self.consumer is not None:
            await self.consumer.close()


def load_settings() -> Optional[PayPalSettings]:
    """Load settings, logging which values are missing or invalid on failure"""
    try:
        return PayPalSettings()
    except ValidationError as e:
        fields = sorted({'PAYPAL_' + str(error['loc'][0]).upper() for error in e.errors() if error['loc']})
        logger.error("Invalid or missing PayPal settings: %s", ', '.join(fields))
        return None


def main() -> int:
    configure_logging()
    settings = load_settings()
    if settings is None:
        return 1
    configure_logging(settings.log_level)

    server = PayPalMCPServer(settings)
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except Exception:
        logger.exception("PayPal MCP server failed")
        return 1
    return 0
