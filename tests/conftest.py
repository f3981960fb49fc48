"""Shared test fixtures."""

import shutil
import tempfile
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from config.settings import AppConfig, PathConfig, SearchConfig
from core.models import ImageRecord
from search.base import BaseSource


class FakeSource(BaseSource):
    """
    Adapter returning canned records, or raising, or sleeping.

    The sleep is sliced and checks ``checkpoint()``, like an adapter making
    one request after another.
    """

    def __init__(
        self,
        cfg: SearchConfig,
        name: str,
        records: Optional[List[ImageRecord]] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ) -> None:
        super().__init__(cfg)
        self.name = name
        self.records = records or []
        self.error = error
        self.delay = delay
        self.calls: List[str] = []
        self.finished = threading.Event()

    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        self.calls.append(query)
        try:
            end = time.monotonic() + self.delay
            while time.monotonic() < end:
                self.checkpoint()
                time.sleep(0.01)
            if self.error is not None:
                raise self.error
            return list(self.records)
        finally:
            self.finished.set()


@pytest.fixture
def tmp_dir():
    d = Path(tempfile.mkdtemp())
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def search_cfg():
    return SearchConfig(poll_interval=0.01, request_timeout=2.0)


@pytest.fixture
def test_config(tmp_dir, search_cfg):
    paths = PathConfig(
        root=tmp_dir,
        log_file=tmp_dir / "test.log",
        export_dir=tmp_dir / "exports",
    )
    cfg = AppConfig(paths=paths, search=search_cfg)
    cfg.paths.ensure()
    return cfg


@pytest.fixture
def make_record() -> Callable[..., ImageRecord]:
    counter = {"n": 0}

    def _make(url: Optional[str] = None, source: str = "google", **kw) -> ImageRecord:
        counter["n"] += 1
        n = counter["n"]
        return ImageRecord(
            url=url or f"https://example.com/{source}/{n}.jpg",
            source=source,
            source_url=f"https://example.com/page/{n}",
            title=kw.pop("title", f"Image {n}"),
            **kw,
        )

    return _make


@pytest.fixture
def fake_source(search_cfg) -> Callable[..., FakeSource]:
    def _make(name: str, **kw) -> FakeSource:
        return FakeSource(search_cfg, name, **kw)

    return _make
