import io
from datetime import datetime

import pytest

from overlordkit import log


class Recorder(log.Handler):
    def __init__(self, fail_on_close=None):
        self.records = []
        self.closed = False
        self.fail_on_close = fail_on_close

    def log(self, level, msg):
        self.records.append((level, msg))

    def close(self):
        self.closed = True
        if self.fail_on_close is not None:
            raise self.fail_on_close


@pytest.fixture(autouse=True)
def reset_logging():
    log.set_flags(False, False, "", 0)
    log.set_default_verbose_level(0)
    yield
    log.init_handle()
    log.set_flags(False, False, "", 0)
    log.set_default_verbose_level(0)


def _today_file(base):
    return f"{base}.{datetime.now().strftime('%Y-%m-%d')}"


def test_level_names():
    stream = io.StringIO()
    log.init_handle(log.StdoutHandler(stream))
    log.info("a")
    log.warn("b")
    log.error("c")
    lines = stream.getvalue().splitlines()
    assert len(lines) == 3
    assert lines[0].endswith("[INFO] a")
    assert lines[1].endswith("[WARN] b")
    assert lines[2].endswith("[ERROR] c")


def test_init_with_config_writes_file(tmp_path):
    base = str(tmp_path / "overlord.log")
    assert log.init(log.Config(stdout=True, debug=True, log=base, log_vl=10)) is True

    log.info("test1")
    log.info("test1", "test2")
    log.warn("test1", "test2", "test3")
    log.error("test1")
    log.infof("1(%s)", "test1")
    log.warnf("1(%s) 2(%s)", "test1", "test2")
    log.errorf("1(%s) 2(%s) 3(%s)", "test1", "test2", "test3")

    log.set_default_verbose_level(3)
    assert not log.v(5)
    log.v(5).info("this cannot be print")
    assert log.v(2)
    log.v(3).infof("this will be printing2:%s", "yeah")
    log.close()

    content = open(_today_file(base), encoding="utf-8").read()
    assert "[INFO] test1\n" in content
    assert "[INFO] test1test2\n" in content
    assert "[WARN] test1test2test3\n" in content
    assert "[ERROR] test1\n" in content
    assert "[INFO] 1(test1)\n" in content
    assert "[WARN] 1(test1) 2(test2)\n" in content
    assert "[ERROR] 1(test1) 2(test2) 3(test3)\n" in content
    assert "[INFO] this will be printing2:yeah\n" in content
    assert "cannot be print" not in content


def test_init_sets_verbose_level_from_config(tmp_path):
    log.init(log.Config(log=str(tmp_path / "a.log"), log_vl=10))
    assert log.v(10)
    assert not log.v(11)
    log.close()


def test_config_stdout_is_overridden_by_flags():
    assert log.init(log.Config(stdout=True, debug=True)) is False


def test_std_flag_logs_to_stdout(capsys):
    log.set_flags(True, False, "", 0)
    assert log.init(None) is True
    log.warn("hi")
    assert "[WARN] hi\n" in capsys.readouterr().out


def test_flags_override_config(tmp_path):
    flagged = str(tmp_path / "flag.log")
    log.set_flags(False, False, flagged, 7)
    assert log.init(log.Config(log=str(tmp_path / "conf.log"))) is True
    log.info("x")
    log.close()
    assert "[INFO] x" in open(_today_file(flagged), encoding="utf-8").read()
    assert log.v(7)
    assert not log.v(8)


def test_sprint_spacing():
    recorder = Recorder()
    log.init_handle(recorder)
    log.info(1, 2)
    log.info("a", 1, 2)
    log.infof("100%")
    assert recorder.records == [
        (log.Level.INFO, "1 2"),
        (log.Level.INFO, "a1 2"),
        (log.Level.INFO, "100%"),
    ]


def test_verbose_methods_respect_level():
    recorder = Recorder()
    log.init_handle(recorder)
    log.set_default_verbose_level(3)
    log.v(4).error("hidden")
    log.v(4).warnf("hidden %s", "x")
    log.v(3).warn("shown")
    log.v(1).errorf("shown %d", 5)
    assert recorder.records == [
        (log.Level.WARN, "shown"),
        (log.Level.ERROR, "shown 5"),
    ]


def test_verbose_close_closes_handlers():
    recorder = Recorder()
    log.init_handle(recorder)
    log.v(0).close()
    assert recorder.closed is True


def test_handlers_close_all_and_raise_last_error():
    first = Recorder(fail_on_close=RuntimeError("first"))
    second = Recorder()
    third = Recorder(fail_on_close=RuntimeError("third"))
    with pytest.raises(RuntimeError, match="third"):
        log.Handlers([first, second, third]).close()
    assert (first.closed, second.closed, third.closed) == (True, True, True)


def test_handlers_fan_out():
    a, b = Recorder(), Recorder()
    log.Handlers([a, b]).log(log.Level.ERROR, "boom")
    assert a.records == b.records == [(log.Level.ERROR, "boom")]


def test_stdout_handler_custom_stream(tmp_path):
    path = tmp_path / "out.txt"
    with open(path, "w", encoding="utf-8") as stream:
        log.StdoutHandler(stream).log(log.Level.INFO, "msg")
    assert open(path, encoding="utf-8").read().endswith("[INFO] msg\n")


def test_file_handler_invalid_base_path(tmp_path):
    with pytest.raises(ValueError):
        log.FileHandler(str(tmp_path) + "/")


def test_file_handler_creates_directories(tmp_path):
    base = str(tmp_path / "nested" / "dir" / "app.log")
    handler = log.FileHandler(base)
    handler.log(log.Level.WARN, "written")
    handler.close()
    assert handler.file_path == _today_file(base)
    assert "[WARN] written\n" in open(handler.file_path, encoding="utf-8").read()


def test_logging_without_handler_is_silent():
    recorder = Recorder()
    log.init_handle(recorder)
    log.init_handle()
    log.error("lost")
    assert recorder.records == []