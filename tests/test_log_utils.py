from datetime import datetime

from wisdom_insights.config import settings
from wisdom_insights.infra import log_utils


def test_log_lines_are_appended_with_utc_stamp_and_level():
    log_utils.log_message("first")
    log_utils.log_message("second", "WARN")

    lines = settings.log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    stamp, rest = lines[1][1:].split("] ", 1)
    assert datetime.fromisoformat(stamp).utcoffset().total_seconds() == 0
    assert rest == "[WARN] second"
    assert lines[0].endswith("[INFO] first")
