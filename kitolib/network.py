"""Line-delimited JSON messaging between a server and its clients over TCP."""

from __future__ import annotations

import base64
import dataclasses
import json
import logging
import re
import socket
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from queue import Empty, Full, Queue
from typing import Any

_log = logging.getLogger(__name__)

MESSAGE_QUEUE_BUFFER_SIZE = 1024
INCOMING_CONNECTIONS_BUFFER_SIZE = 1024
UNSET_CLIENT_ID = -1

MESSAGE_TYPE_ACCEPT_CONNECTION = 0
MESSAGE_TYPE_ACK_CREATE_PLAYER = 1

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_TIME_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)
_FAMILIES = {
    "tcp": socket.AF_UNSPEC,
    "tcp4": socket.AF_INET,
    "tcp6": socket.AF_INET6,
}


@dataclass
class Message:
    sender_id: int = 0
    message_type: int = 0
    command_frame: int = 0
    timestamp: datetime = _ZERO_TIME
    body: bytes = b""


@dataclass(frozen=True)
class AcceptMessage:
    id: int


@dataclass
class Connection:
    id: int
    connection: socket.socket = field(repr=False)


def _format_time(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset()
    if not offset:
        return text + "Z"
    minutes = int(offset.total_seconds() // 60)
    sign = "+" if minutes >= 0 else "-"
    minutes = abs(minutes)
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _parse_time(text: str) -> datetime:
    match = _TIME_RE.match(text)
    if match is None:
        raise ValueError(f"invalid timestamp {text!r}")
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction = (match.group(7) or "")[:6].ljust(6, "0")
    zone = match.group(8)
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    return datetime(year, month, day, hour, minute, second, int(fraction), tzinfo=tz)


def _encode_message(message: Message) -> bytes:
    payload = {
        "SenderID": message.sender_id,
        "MessageType": message.message_type,
        "CommandFrame": message.command_frame,
        "Timestamp": _format_time(message.timestamp),
        "Body": base64.b64encode(message.body).decode("ascii") if message.body else None,
    }
    return (json.dumps(payload, separators=(",", ":")) + "\n").encode("utf-8")


def _decode_message(line: bytes) -> Message:
    data = json.loads(line)
    if not isinstance(data, dict):
        raise ValueError("a message must be a JSON object")
    body = data.get("Body")
    timestamp = data.get("Timestamp")
    return Message(
        sender_id=int(data.get("SenderID", 0)),
        message_type=int(data.get("MessageType", 0)),
        command_frame=int(data.get("CommandFrame", 0)),
        timestamp=_parse_time(timestamp) if timestamp else _ZERO_TIME,
        body=base64.b64decode(body, validate=True) if body else b"",
    )


def _encode_body(body: Any) -> bytes:
    if isinstance(body, AcceptMessage):
        body = {"ID": body.id}
    elif dataclasses.is_dataclass(body) and not isinstance(body, type):
        body = dataclasses.asdict(body)
    return json.dumps(body, separators=(",", ":")).encode("utf-8")


def deserialize_body(message: Message) -> Any:
    """The JSON value carried in the message body."""
    if not message.body:
        raise ValueError("message has no body")
    return json.loads(message.body)


def _close_socket(conn: socket.socket) -> None:
    try:
        conn.shutdown(socket.SHUT_RDWR)
    except OSError:
        pass
    conn.close()


def _queue_incoming_messages(conn: socket.socket, messages: Queue) -> None:
    reader = conn.makefile("rb")
    try:
        for line in reader:
            if not line.strip():
                continue
            try:
                message = _decode_message(line)
            except (ValueError, TypeError) as err:
                _log.error("error reading incoming message: %s; closing connection", err)
                return
            message.timestamp = datetime.now(timezone.utc)
            try:
                messages.put_nowait(message)
            except Full:
                _log.warning("message queue full")
    except (OSError, ValueError):
        pass
    finally:
        reader.close()
        _close_socket(conn)


def _default_command_frame() -> int:
    return -69


class Client:
    """One end of a connection; incoming messages are queued by a reader thread."""

    def __init__(self, id: int, connection: socket.socket) -> None:
        self.id = id
        self._connection = connection
        self._messages: Queue[Message] = Queue(maxsize=MESSAGE_QUEUE_BUFFER_SIZE)
        self._command_frame_func: Callable[[], int] = _default_command_frame
        self._send_lock = threading.Lock()
        self._reader = threading.Thread(
            target=_queue_incoming_messages, args=(connection, self._messages), daemon=True
        )
        self._reader.start()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        _close_socket(self._connection)
        self._reader.join(timeout=1)

    def set_command_frame_function(self, func: Callable[[], int]) -> None:
        self._command_frame_func = func

    def pull_incoming_messages(self) -> list[Message]:
        """All messages received so far, without waiting."""
        messages = []
        for _ in range(self._messages.qsize()):
            try:
                messages.append(self._messages.get_nowait())
            except Empty:
                break
        return messages

    def send_message(self, message_type: int, message_body: Any) -> None:
        body = b"" if message_body is None else _encode_body(message_body)
        message = Message(
            sender_id=self.id,
            message_type=message_type,
            command_frame=self._command_frame_func(),
            timestamp=datetime.now(timezone.utc),
            body=body,
        )
        with self._send_lock:
            self._connection.sendall(_encode_message(message))

    def sync_receive_message(self) -> Message:
        """Wait for the next incoming message."""
        return self._messages.get()


def _family(connection_type: str) -> int:
    try:
        return _FAMILIES[connection_type]
    except KeyError:
        raise ValueError(f"unsupported connection type {connection_type!r}") from None


def _read_line(conn: socket.socket) -> bytes:
    # read byte by byte so nothing meant for the reader thread is consumed
    line = bytearray()
    while True:
        byte = conn.recv(1)
        if not byte:
            raise ConnectionError("connection closed before the accept message arrived")
        line += byte
        if byte == b"\n":
            return bytes(line)


def _open_connection(host: str, port: str, family: int) -> socket.socket:
    last_error: OSError | None = None
    for fam, kind, proto, _, address in socket.getaddrinfo(host, int(port), family, socket.SOCK_STREAM):
        conn = socket.socket(fam, kind, proto)
        try:
            conn.connect(address)
            return conn
        except OSError as err:
            conn.close()
            last_error = err
    raise last_error or OSError(f"cannot resolve {host}:{port}")


def connect(host: str, port: str, connection_type: str) -> tuple[Client, int]:
    """Connect to a server and wait for it to assign this client an id."""
    family = _family(connection_type)
    _log.info("connecting to %s:%s via %s", host, port, connection_type)
    conn = _open_connection(host, str(port), family)
    try:
        body = deserialize_body(_decode_message(_read_line(conn)))
        if not isinstance(body, dict):
            raise ValueError("malformed accept message")
        accept = AcceptMessage(int(body.get("ID", 0)))
    except BaseException:
        conn.close()
        raise
    return Client(accept.id, conn), accept.id


class Server:
    """Accepts connections, assigning each an increasing id."""

    def __init__(self, host: str, port: str, connection_type: str, id_start: int) -> None:
        self.host = host
        self.port = str(port)
        self.connection_type = connection_type
        self._next_id = id_start
        self._id_lock = threading.Lock()
        self._incoming: Queue[Connection] = Queue(maxsize=INCOMING_CONNECTIONS_BUFFER_SIZE)
        self._listener: socket.socket | None = None
        self._closed = threading.Event()

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._closed.set()
        if self._listener is not None:
            _close_socket(self._listener)

    def start(self) -> None:
        """Listen for connections on a background thread; the bound port is kept in ``port``."""
        family = _family(self.connection_type)
        infos = socket.getaddrinfo(
            self.host or None, int(self.port), family, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
        )
        listener = socket.create_server((self.host, int(self.port)), family=infos[0][0])
        self._listener = listener
        self.port = str(listener.getsockname()[1])
        _log.info("listening on %s:%s", self.host, self.port)
        threading.Thread(target=self._accept_loop, args=(listener,), daemon=True).start()

    def _generate_next_id(self) -> int:
        with self._id_lock:
            connection_id = self._next_id
            self._next_id += 1
        return connection_id

    def _accept_loop(self, listener: socket.socket) -> None:
        with listener:
            while not self._closed.is_set():
                try:
                    conn, _ = listener.accept()
                except OSError as err:
                    if self._closed.is_set():
                        return
                    _log.error("error accepting a connection on the listener: %s", err)
                    continue

                connection_id = self._generate_next_id()
                accept = Message(
                    sender_id=0,
                    message_type=MESSAGE_TYPE_ACCEPT_CONNECTION,
                    body=_encode_body(AcceptMessage(connection_id)),
                )
                try:
                    conn.sendall(_encode_message(accept))
                except OSError as err:
                    _log.error("error sending accept message: %s", err)
                    conn.close()
                    continue

                try:
                    self._incoming.put_nowait(Connection(connection_id, conn))
                except Full:
                    conn.close()
                    raise RuntimeError("incoming connections queue full") from None

    def pull_incoming_connections(self) -> list[Connection]:
        """Connections accepted so far, without waiting."""
        connections = []
        for _ in range(INCOMING_CONNECTIONS_BUFFER_SIZE):
            try:
                connections.append(self._incoming.get_nowait())
            except Empty:
                break
        return connections