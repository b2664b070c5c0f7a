from typing import Optional

from flask_socketio import SocketIO

CONVERSION_COMPLETED = "conversion_completed"

_socketio: Optional[SocketIO] = None

def init_socketio(sio: SocketIO):
    global _socketio
    _socketio = sio

def emit_conversion(job_id: Optional[str], ok: bool, payload: dict, to: Optional[str] = None):
    """
    Send the outcome of one conversion to the client that uploaded it.
    Payloads carry download links, so nothing is broadcast when `to` is unset.
    """
    if not to:
        return
    if not _socketio:
        print(f"[SOCKET.IO] Warning: socketio not initialized, dropped '{CONVERSION_COMPLETED}'")
        return
    data = {"job_id": job_id, "status": "success" if ok else "failed"}
    data.update(payload)
    _socketio.emit(CONVERSION_COMPLETED, data, to=to)
    print(f"[SOCKET.IO] Emitted '{CONVERSION_COMPLETED}' for job {job_id} to {to}: {data['status']}")
