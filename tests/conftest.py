import asyncio
import codecs
from pathlib import Path

import pytest

from scumfeed.errors import DispatchError
from scumfeed.models.source import SinkChannel, Source

CHANNEL = SinkChannel(123456789012345678, "test-token")


class FakeNotifier:
    """Records what would have been sent to Discord"""

    def __init__(self, fail=False, delay=0.0):
        self.sent = []
        self.fail = fail
        self.delay = delay
        self.closed = False

    async def send(self, channel, embed):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise DispatchError("webhook down")
        self.sent.append((channel, embed))

    async def close(self):
        self.closed = True


def write_log(path: Path, lines, append=False, terminate=True):
    """Write lines as UTF-16 LE with a BOM, the way the SCUM server does"""
    text = "\n".join(lines)
    if terminate and lines:
        text += "\n"
    data = text.encode("utf-16-le")
    if not append or not path.exists():
        data = codecs.BOM_UTF16_LE + data
        mode = "wb"
    else:
        mode = "ab"
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, mode) as f:
        f.write(data)
    return path


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def log_dir(tmp_path):
    directory = tmp_path / "Logs"
    directory.mkdir()
    return directory


@pytest.fixture
def make_source(log_dir):
    def make(name="kills", pattern="kill_*.log", **overrides):
        options = dict(name=name, directory=log_dir, pattern=pattern, channel=CHANNEL, poll_interval=1.0)
        options.update(overrides)
        return Source(**options)
    return make
