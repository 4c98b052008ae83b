import pytest

from positbench import cli, harness, sweep


class RecordingLogger:
    """Stand-in for MasterLogger that keeps messages instead of configuring logging."""

    def __init__(self):
        self.records = []
        self.files = []

    def _add(self, level, st):
        self.records.append((level, str(st)))

    def debug(self, st):
        self._add("debug", st)

    def info(self, st):
        self._add("info", st)

    def warning(self, st):
        self._add("warning", st)

    def error(self, st):
        self._add("error", st)

    def add_file_handler(self, filename):
        self.files.append(str(filename))

    def messages(self, level):
        return [m for lvl, m in self.records if lvl == level]


@pytest.fixture(autouse=True)
def log(monkeypatch):
    rec = RecordingLogger()
    for mod in (harness, sweep, cli):
        monkeypatch.setattr(mod, "logger", rec)
    return rec
