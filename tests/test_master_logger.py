import logging

from tools.master_logger import MasterLogger


def test_file_handler_writes_records_and_creates_parent_dirs(tmp_path):
    path = tmp_path / "run" / "logs" / "run.log"
    handler = MasterLogger.add_file_handler(path)
    try:
        MasterLogger.warning("posit32 input matrices are invalid at size 10x10")
    finally:
        logging.getLogger("positbench").removeHandler(handler)
        handler.close()
    text = path.read_text(encoding="utf-8")
    assert "WARNING positbench" in text
    assert "invalid at size 10x10" in text
