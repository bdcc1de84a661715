"""JSON 文件存取（所有插件共用）。

设计目标：
- 一个 JSON 文件对应一个 store，整份读入内存，整份写回磁盘
- 启动时只读一次；文件不存在/损坏时降级为空对象，避免插件直接崩溃
- 写入使用临时文件 + os.replace，避免写坏文件

写入失败不做处理，异常直接抛给调用方。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
import json
import os
import threading

from nonebot import logger


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def resolve_path(path_str: str | os.PathLike[str]) -> Path:
    """相对路径以当前工作目录为基准（与 bot.py 运行方式一致）。"""

    path = Path(path_str)
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path


class JsonStore:
    """JSON 文件存储（带内存缓存与线程锁）。"""

    def __init__(self, path: Path):
        self._path = path
        self._lock = threading.RLock()
        self._data: dict[str, Any] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load_if_needed(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data

        if not self._path.exists():
            self._data = {}
            return self._data

        try:
            self._data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            logger.warning(f"JSON 文件读取失败，按空内容处理: {self._path} ({exc})")
            self._data = {}
        if not isinstance(self._data, dict):
            self._data = {}
        return self._data

    def reload(self) -> None:
        """强制从磁盘重新加载。"""

        with self._lock:
            self._data = None
            self._load_if_needed()

    def get(self, key: str, default: Any = None) -> Any:
        """读取顶层 key。

        注意：不支持点路径，WhatsApp 的 jid 本身就带 "."，只能整段作为 key。
        """

        with self._lock:
            return self._load_if_needed().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """写入顶层 key（只写内存，不自动保存）。"""

        with self._lock:
            self._load_if_needed()[key] = value

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return json.loads(json.dumps(self._load_if_needed()))

    def save(self) -> None:
        """原子写入保存到磁盘。"""

        with self._lock:
            data = self._load_if_needed()
            _ensure_parent(self._path)

            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_text(
                json.dumps(data, ensure_ascii=False, indent=2) + "\n",
                encoding="utf-8",
            )
            os.replace(tmp, self._path)


_stores: dict[Path, JsonStore] = {}
_stores_lock = threading.Lock()


def get_store(path_str: str | os.PathLike[str]) -> JsonStore:
    """按文件路径获取 store（同一路径共享同一个实例）。"""

    path = resolve_path(path_str)
    with _stores_lock:
        store = _stores.get(path)
        if store is None:
            store = JsonStore(path)
            _stores[path] = store
        return store
