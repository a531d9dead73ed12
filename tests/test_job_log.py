# File: tests/test_job_log.py
# Purpose: Formatting and serialized appends of the default job log
import io
import threading

import pytest

from clearcase_bridge.core.job_log import JobLog


def test_lines_fatal_and_error_entries():
    log = JobLog()

    log.write_line("checking out")
    log.write_line()
    log.error("Unable to delete /tmp/cleartool123log")
    assert not log.failed
    log.write_fatal("ClearCase failed. exit code=1")

    assert log.failed
    assert log.lines() == [
        "checking out",
        "",
        "ERROR: Unable to delete /tmp/cleartool123log",
        "FATAL: ClearCase failed. exit code=1",
    ]


def test_raw_bytes_and_lines_share_one_stream():
    log = JobLog()

    log.write(b"raw output\n")
    log.write_line("after")

    assert log.getvalue() == "raw output\nafter\n"


def test_external_stream_is_written_not_closed():
    stream = io.BytesIO()
    log = JobLog(stream)

    log.write_line("héllo")
    log.flush()

    assert stream.getvalue() == "héllo\n".encode("utf-8")
    assert not stream.closed


def test_getvalue_requires_in_memory_stream(tmp_path):
    with open(tmp_path / "job.log", "wb") as stream:
        log = JobLog(stream)
        log.write_line("x")
        with pytest.raises(TypeError):
            log.getvalue()


def test_concurrent_appends_stay_whole():
    log = JobLog()

    def worker(n):
        for i in range(200):
            log.write_line(f"worker-{n} line-{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    lines = log.lines()
    assert len(lines) == 8 * 200
    for n in range(8):
        mine = [line for line in lines if line.startswith(f"worker-{n} ")]
        assert mine == [f"worker-{n} line-{i}" for i in range(200)]
