""":mod:`bot74.irc.backends` defines bot74's IRC connection handlers.

.. warning::

    This is all internal code, not intended for direct use by bot modules.

"""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

import asyncio
import logging
import signal
import ssl
from typing import Optional, TYPE_CHECKING

from typing_extensions import override

from .abstract_backends import AbstractIRCBackend


if TYPE_CHECKING:
    from bot74.bot import Bot
    from .message import Message


LOGGER = logging.getLogger(__name__)
QUIT_SIGNALS = [
    getattr(signal, name)
    for name in ['SIGUSR1', 'SIGTERM', 'SIGINT']
    if hasattr(signal, name)
]


class UninitializedBackend(AbstractIRCBackend):
    """Backend of a bot that hasn't started connecting yet.

    :param bot: the bot using this backend

    Every attempt to talk to IRC through it raises :exc:`RuntimeError`.
    """
    @override
    def is_connected(self) -> bool:
        return False

    @override
    def on_irc_error(self, message: Message) -> None:
        raise RuntimeError("Received error from unconnected backend.")

    @override
    def irc_send(self, data: bytes) -> None:
        raise RuntimeError("Attempt to send data to unconnected backend.")

    @override
    def run_forever(self) -> None:
        raise RuntimeError("Attempt to run dummy backend that cannot connect.")


class AsyncioBackend(AbstractIRCBackend):
    """IRC backend reading and writing with :mod:`asyncio` streams.

    :param bot: the bot using this backend
    :param host: IRC server hostname or IP
    :param port: IRC server port
    :param source_address: optional ``(host, port)`` to bind to
    :param server_timeout: seconds without any line from the server before
                           the connection is dropped (defaults to 120s)
    :param ping_interval: seconds without any line from the server before
                          the bot sends a ``PING`` (defaults to 45% of
                          ``server_timeout``)
    :param use_ssl: whether to connect with TLS
    :param verify_ssl: whether to verify the server's certificate and
                       hostname; ignored without ``use_ssl``

    Lines are handed to the bot one at a time: the next line is read only
    once :meth:`bot.on_message() <bot74.bot.Bot.on_message>` returned.
    Reading stops after the message that made the bot quit; closing the
    connection then flushes the ``QUIT`` line.
    """
    def __init__(
        self,
        bot: Bot,
        host: str,
        port: int,
        source_address: Optional[tuple[str, int]] = None,
        server_timeout: Optional[int] = None,
        ping_interval: Optional[int] = None,
        use_ssl: bool = False,
        verify_ssl: bool = True,
    ):
        super().__init__(bot)
        self._host = host
        self._port = port
        self._source_address = source_address
        self._use_ssl = use_ssl
        self._verify_ssl = verify_ssl
        self._server_timeout = float(server_timeout or 120)
        self._ping_interval = float(
            ping_interval or (self._server_timeout * 0.45))

        self._connected = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._read_task: Optional[asyncio.Task] = None
        self._timers: list[asyncio.TimerHandle] = []

    def _signal_quit(self) -> None:
        LOGGER.info('Receiving QUIT signal.')
        self.bot.quit('Quit')

    # inactivity timers

    def _cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    def _restart_timers(self) -> None:
        self._cancel_timers()
        loop = asyncio.get_running_loop()
        self._timers = [
            loop.call_later(self._ping_interval, self._on_inactivity),
            loop.call_later(self._server_timeout, self._on_timeout),
        ]

    def _on_inactivity(self) -> None:
        LOGGER.debug(
            'Sending PING after %0.1fs of inactivity.', self._ping_interval)
        self.send_ping(self._host)

    def _on_timeout(self) -> None:
        LOGGER.warning(
            'Reached timeout (%0.1fs); closing connection.',
            self._server_timeout)
        self._cancel_timers()
        if self._read_task is not None:
            self._read_task.cancel()

    # backend interface

    @override
    def is_connected(self) -> bool:
        return self._connected

    @override
    def on_irc_error(self, message: Message) -> None:
        if self.bot.hasquit and self._writer is not None:
            self._writer.close()

    @override
    def irc_send(self, data: bytes) -> None:
        if self._loop is None:
            raise RuntimeError('EventLoop not initialized.')
        self._loop.create_task(self._write(data))

    async def _write(self, data: bytes) -> None:
        if self._writer is None:
            raise RuntimeError('Writer not initialized.')
        self._writer.write(data)
        await self._writer.drain()

    async def read_forever(self, reader: asyncio.StreamReader) -> None:
        """Hand every line from ``reader`` to the bot, until EOF or quit.

        Each received line restarts the inactivity timers: a ``PING`` is
        sent after ``ping_interval`` seconds of silence, and the connection
        is dropped after ``server_timeout`` seconds.
        """
        while not reader.at_eof():
            try:
                line = await reader.readuntil(separator=b'\r\n')
            except asyncio.IncompleteReadError as err:
                line = err.partial
            except asyncio.LimitOverrunError:
                LOGGER.exception('Unable to read from IRC server.')
                break

            self._restart_timers()
            if not line:
                continue

            try:
                data = self.decode_line(line)
            except ValueError:
                LOGGER.error('Unable to decode line from IRC server: %r', line)
                continue

            try:
                self.bot.log_raw(data, '<<')
                self.bot.on_message(data)
            except Exception:
                LOGGER.exception('Unexpected exception on message handling.')
                LOGGER.warning('Stopping the backend after error.')
                break

            if self.bot.hasquit:
                LOGGER.debug('Bot has quit; stop reading.')
                break

        self._cancel_timers()

    # run & connection

    def get_connection_kwargs(self) -> dict:
        """Get the keyword arguments of :func:`asyncio.open_connection`."""
        ssl_context: Optional[ssl.SSLContext] = None

        if self._use_ssl:
            ssl_context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
            if not self._verify_ssl:
                ssl_context.check_hostname = False
                ssl_context.verify_mode = ssl.CERT_NONE

        return {
            'host': self._host,
            'port': self._port,
            'ssl': ssl_context,
            'local_addr': self._source_address,
        }

    async def _run_forever(self) -> None:
        self._loop = asyncio.get_running_loop()
        for quit_signal in QUIT_SIGNALS:
            self._loop.add_signal_handler(quit_signal, self._signal_quit)

        try:
            reader, self._writer = await asyncio.open_connection(
                **self.get_connection_kwargs())
        except OSError as err:
            # ssl.SSLError and socket.gaierror are OSError subclasses
            LOGGER.error(
                'Unable to connect to %s:%s: %s', self._host, self._port, err)
            self.log_exception()
            self.bot.hasquit = True
            return

        self._connected = True
        self.bot.on_connect()

        self._read_task = asyncio.create_task(self.read_forever(reader))
        try:
            await self._read_task
        except asyncio.CancelledError:
            LOGGER.debug('Read task was cancelled.')
        except ConnectionError as err:
            LOGGER.error('Connection error on read: %s', err)
            self.log_exception()
        finally:
            self._connected = False
            self._cancel_timers()

        self._writer.close()
        try:
            await self._writer.wait_closed()
        except ConnectionError as err:
            LOGGER.debug('Connection error while closing: %s', err)

    @override
    def run_forever(self) -> None:
        """Connect, and handle the connection until it closes."""
        asyncio.run(self._run_forever())
        LOGGER.info('Connection backend stopped.')
        self.bot.on_close()
