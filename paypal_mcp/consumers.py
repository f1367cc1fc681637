"""
STDIO consumer for MCP protocol communication

Messages are newline-delimited JSON-RPC objects on stdin; responses are
written one per line to stdout.
"""

import asyncio
import json
import logging
import sys
import uuid
from typing import Any, Dict, Optional, Set, TextIO

from .errors import ErrorCode
from .protocol import MCPProtocolHandler

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are Python extensions, not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


async def open_stdin_reader() -> asyncio.StreamReader:
    """Wrap the process stdin in an asyncio StreamReader"""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    return reader


class MCPStdioConsumer:
    """Read MCP messages from a stream and write responses back

    Each request is handled in its own task so slow upstream calls do not
    block later requests. Each response is written as one whole line.
    """

    def __init__(self, protocol_handler: MCPProtocolHandler, reader: asyncio.StreamReader,
                 writer: Optional[TextIO] = None):
        self.session_id = str(uuid.uuid4())
        self.protocol_handler = protocol_handler
        self.reader = reader
        self.writer = writer or sys.stdout
        self._tasks: Set[asyncio.Task] = set()
        self._closed = False

    async def run(self):
        """Consume messages until EOF or close()"""
        logger.info("MCP stdio session started: %s", self.session_id)
        try:
            while not self._closed:
                line = await self.reader.readline()
                if not line:
                    break
                text = line.decode('utf-8', errors='replace').strip()
                if not text:
                    continue
                task = asyncio.create_task(self.receive(text))
                self._tasks.add(task)
                task.add_done_callback(self._task_done)

            if self._tasks:
                await asyncio.gather(*self._tasks, return_exceptions=True)
        finally:
            self._closed = True
            logger.info("MCP stdio session ended: %s", self.session_id)

    async def receive(self, text_data: str):
        """Handle one raw message line"""
        try:
            message_data = json.loads(text_data, parse_constant=_reject_constant)
        except ValueError:
            self.send({
                "jsonrpc": "2.0",
                "id": None,
                "error": {
                    "code": int(ErrorCode.PARSE_ERROR),
                    "message": "Parse error"
                }
            })
            return

        response = await self.handle_message(message_data)
        if response is not None:
            self.send(response)

    async def handle_message(self, message_data: Any) -> Optional[Dict[str, Any]]:
        """Handle a single decoded MCP message"""
        return await self.protocol_handler.handle_message(message_data)

    def _task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Failed to handle MCP message: %r", error, exc_info=error)

    def send(self, response: Dict[str, Any]):
        if self._closed:
            return
        self.writer.write(json.dumps(response) + "\n")
        self.writer.flush()

    async def close(self):
        """Stop reading and cancel in-flight requests"""
        self._closed = True
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
