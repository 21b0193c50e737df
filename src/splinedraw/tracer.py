"""
Hierarchical runtime tracing for splinedraw.

Nested, timed log lines for curve evaluation and graph decomposition, so a
misbehaving junction or a skipped fillet can be diagnosed without a debugger.
Silent unless enabled.

Line format:

    12:04:31.207 INFO    decompose:faces  start
    12:04:31.208 DEBUG     faces:trace_faces  Traced 3 faces from 16 half-edges
"""

import functools
import hashlib
import json
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import IO, List, Optional


LEVELS = {"ERROR": 0, "WARN": 1, "INFO": 2, "DEBUG": 3}


@dataclass
class TracerConfig:
    """Where trace lines go and how verbose they are."""
    enabled: bool = False
    level: str = "INFO"
    file_path: Optional[str] = None
    json_output: bool = False
    _file_handle: Optional[IO] = field(default=None, repr=False)

    def configure(self, enabled=False, level="INFO", file_path=None, json_output=False):
        """Apply settings; any previously opened trace file is closed first."""
        self.close()
        self.enabled = enabled
        self.level = level.upper()
        self.file_path = file_path
        self.json_output = json_output
        if enabled and file_path:
            self._file_handle = open(file_path, "w", encoding="utf-8")

    def close(self):
        if self._file_handle is not None:
            self._file_handle.close()
        self._file_handle = None

    def write(self, line):
        print(line, file=sys.stderr)
        if self._file_handle is not None:
            self._file_handle.write(f"{line}\n")
            self._file_handle.flush()


@dataclass
class _OpenSpan:
    name: str
    module: str
    started: float = field(default_factory=time.perf_counter)

    @property
    def elapsed_ms(self):
        return (time.perf_counter() - self.started) * 1000


class Tracer:
    """
    Hierarchical tracer.

    Spans nest and report their duration; events attach to the innermost
    open span. Lines are indented two spaces per open span.
    """

    def __init__(self):
        self.config = TracerConfig()
        self._stack: List[_OpenSpan] = []

    @property
    def depth(self):
        return len(self._stack)

    def is_enabled_for(self, level):
        if not self.config.enabled:
            return False
        return LEVELS.get(level, LEVELS["INFO"]) <= LEVELS.get(self.config.level, LEVELS["INFO"])

    def _log(self, level, module, func, message, meta=None):
        if not self.is_enabled_for(level):
            return

        seconds = time.time()
        stamp = time.strftime("%H:%M:%S", time.localtime(seconds)) + f".{int(seconds * 1000) % 1000:03d}"
        where = f"{module}:{func}" if func else module
        indent = "  " * self.depth
        self.config.write(f"{stamp} {level:<5} {indent}{where}  {message}")

        if self.config.json_output:
            self.config.write(json.dumps({
                "timestamp": stamp,
                "level": level,
                "depth": self.depth,
                "module": module,
                "function": func,
                "message": message,
                "meta": {key: summarize(value) for key, value in (meta or {}).items()},
            }))

    @contextmanager
    def span(self, name, module="", **meta):
        """
        Context manager for a traced span.

        Logs start and end with timing; a raised exception is logged at
        ERROR level and re-raised.
        """
        if not self.config.enabled:
            yield
            return

        self._log("INFO", module, name, _with_meta("start", meta), meta)
        current = _OpenSpan(name, module)
        self._stack.append(current)
        try:
            yield
        except Exception as e:
            self._stack.pop()
            self._log("ERROR", module, name,
                      f"failed dt={current.elapsed_ms:.1f}ms error={type(e).__name__}: {str(e)[:100]}")
            raise
        self._stack.pop()
        self._log("INFO", module, name, f"end ok dt={current.elapsed_ms:.1f}ms")

    def event(self, message, level="INFO", **meta):
        """Log a one-off event within the current span."""
        if not self.is_enabled_for(level):
            return

        inner = self._stack[-1] if self._stack else _OpenSpan("", "")
        self._log(level, inner.module, inner.name, _with_meta(message, meta), meta)


def _with_meta(message, meta):
    parts = [message] + [f"{key}={summarize(value)}" for key, value in meta.items()]
    return " ".join(p for p in parts if p)


def summarize(obj, max_len=200):
    """
    Compact, bounded description of an object for trace lines.

    Knows about numpy arrays, point tuples, kernel models (paths, graphs,
    styles), networkx graphs and shapely geometries; anything it cannot
    describe becomes `<TypeName>`.
    """
    try:
        text = _describe(obj)
    except Exception:
        text = f"<{type(obj).__name__}>"
    return text if len(text) <= max_len else text[:max_len - 3] + "..."


def _describe(obj):
    if obj is None or isinstance(obj, bool):
        return str(obj)
    if isinstance(obj, float):
        return f"{obj:g}"
    if isinstance(obj, int):
        return str(obj)
    if isinstance(obj, str):
        return repr(obj) if len(obj) <= 50 else f"str(len={len(obj)})"

    import numpy as np
    if isinstance(obj, np.ndarray):
        return _describe_array(obj)

    from shapely.geometry.base import BaseGeometry
    if isinstance(obj, BaseGeometry):
        return f"{obj.geom_type}(bounds=[{','.join(f'{b:.1f}' for b in obj.bounds)}])"

    import networkx as nx
    if isinstance(obj, nx.Graph):
        return f"{type(obj).__name__}(nodes={obj.number_of_nodes()},edges={obj.number_of_edges()})"

    from pydantic import BaseModel
    if isinstance(obj, BaseModel):
        return _describe_model(obj)

    if isinstance(obj, tuple) and len(obj) == 2 and all(isinstance(v, (int, float)) for v in obj):
        return f"({obj[0]:.3g},{obj[1]:.3g})"
    if isinstance(obj, (list, tuple)):
        head = f",first={type(obj[0]).__name__}" if obj else ""
        return f"{type(obj).__name__}(len={len(obj)}{head})"
    if isinstance(obj, dict):
        return f"dict(len={len(obj)},keys=[{','.join(str(k) for k in list(obj)[:5])}])"

    return f"<{type(obj).__name__}>"


def _describe_array(arr):
    # Content hash for small arrays so identical point sets are recognisable.
    shape = "x".join(str(s) for s in arr.shape)
    payload = arr.tobytes() if 0 < arr.size < 1000 else shape.encode()
    return f"ndarray({arr.dtype},{shape},h={hashlib.md5(payload).hexdigest()[:8]})"


def _describe_model(model):
    name = type(model).__name__
    if hasattr(model, "kind"):
        params = [
            f"{key}={getattr(value, 'value', value)}"
            for key, value in model.model_dump().items() if key != "kind"
        ]
        return f"{name}({','.join(params)})"
    if hasattr(model, "points") and hasattr(model, "closed"):
        return f"{name}(points={len(model.points)},closed={model.closed})"
    if hasattr(model, "vertices") and hasattr(model, "edges"):
        return f"{name}(vertices={len(model.vertices)},edges={len(model.edges)})"
    if hasattr(model, "paths"):
        return f"{name}(paths={len(model.paths)})"
    return f"{name}(fields={list(type(model).model_fields)[:3]}...)"


def trace(label=None, arg_names=None):
    """
    Wrap a function in a tracer span.

    Keyword arguments listed in arg_names are summarized on the span's start
    line. When tracing is disabled the function is called directly.
    """
    def decorator(func):
        module = (func.__module__ or "").rsplit(".", 1)[-1]
        span_name = label or func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not _tracer.config.enabled:
                return func(*args, **kwargs)
            meta = {name: kwargs[name] for name in (arg_names or ()) if name in kwargs}
            with _tracer.span(span_name, module=module, **meta):
                return func(*args, **kwargs)

        return wrapper
    return decorator


_tracer = Tracer()


def get_tracer():
    return _tracer


def configure_tracer(enabled=False, level="INFO", file_path=None, json_output=False):
    """Configure the process-wide tracer."""
    _tracer.config.configure(enabled=enabled, level=level, file_path=file_path, json_output=json_output)
