"""
Tests for trace logging configuration and rich pipeline printing.
"""

import io
import logging

from rich.console import Console
from rich.tree import Tree

from itchain import (
    It,
    Self,
    configure_trace_logging,
    decorate,
    get_trace_logger,
    restore_stderr_logging,
    suppress_stderr_logging,
)
from itchain.logging_config import TRACE_LOGGER_NAME, FlushingStreamHandler
from itchain import pipeline_tree, print_pipeline


def render(pipeline) -> str:
    console = Console(file=io.StringIO(), record=True, width=100, color_system=None)
    print_pipeline(pipeline, console=console)
    return console.export_text()


# =============================================================================
# Logging
# =============================================================================

class TestTraceLogging:

    def test_silent_by_default(self):
        logger = get_trace_logger()
        assert logger.name == TRACE_LOGGER_NAME
        assert [type(h) for h in logger.handlers] == [logging.NullHandler]

    def test_trace_passes_subject_through(self):
        marker = object()
        assert It.trace("x")(marker) is marker

    def test_trace_logs_subject(self, caplog):
        with caplog.at_level(logging.DEBUG, logger=TRACE_LOGGER_NAME):
            assert It.get("a").trace("after get").add(1)({"a": 1}) == 2
        assert "after get: 1" in caplog.text

    def test_trace_without_label(self, caplog):
        with caplog.at_level(logging.DEBUG, logger=TRACE_LOGGER_NAME):
            It.trace()("plain")
        assert "'plain'" in caplog.text

    def test_stderr_handler_from_env(self, monkeypatch, capsys):
        monkeypatch.setenv("ITCHAIN_DEBUG_LOG", "1")
        logger = configure_trace_logging()
        assert any(isinstance(h, FlushingStreamHandler) for h in logger.handlers)
        assert logger.propagate is False

        It.trace("seen")(42)
        assert "seen: 42" in capsys.readouterr().err

    def test_suppress_and_restore_stderr(self, capsys):
        configure_trace_logging(stderr=True)

        suppress_stderr_logging()
        It.trace("hidden")(1)
        assert "hidden" not in capsys.readouterr().err

        restore_stderr_logging()
        It.trace("shown")(2)
        assert "shown: 2" in capsys.readouterr().err

    def test_log_file(self, tmp_path):
        log_path = tmp_path / "logs" / "trace.log"
        logger = configure_trace_logging(log_file=log_path)
        It.trace("to file")("value")
        for handler in logger.handlers:
            handler.flush()
        assert "to file: 'value'" in log_path.read_text(encoding="utf-8")

    def test_log_file_from_env(self, monkeypatch, tmp_path):
        log_path = tmp_path / "env.log"
        monkeypatch.setenv("ITCHAIN_LOG_FILE", str(log_path))
        logger = configure_trace_logging()
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        assert not any(isinstance(h, FlushingStreamHandler) for h in logger.handlers)

    def test_reconfigure_replaces_handlers(self):
        configure_trace_logging(stderr=True)
        logger = configure_trace_logging(stderr=True)
        assert len(logger.handlers) == 1
        logger = configure_trace_logging()
        assert [type(h) for h in logger.handlers] == [logging.NullHandler]


# =============================================================================
# Printing
# =============================================================================

class TestPipelineTree:

    def test_tree_type(self):
        assert isinstance(pipeline_tree(It.get("a")), Tree)

    def test_root_labels(self):
        assert str(pipeline_tree(It).label) == "It"
        assert str(pipeline_tree(Self.get("x")).label) == "Self"

    def test_one_node_per_step(self):
        tree = pipeline_tree(It.get("a").invoke("upper").default_to("none"))
        assert [str(node.label) for node in tree.children] == [
            "get('a')",
            "invoke('upper')",
            "default_to('none')",
        ]

    def test_nested_steps_are_children(self):
        tree = pipeline_tree(It.get("last").run_if_truthy(It.invoke("lower")))
        maybe_node = tree.children[1]
        assert [str(node.label) for node in maybe_node.children] == ["invoke('lower')"]

    def test_decorated_function(self):
        tree = pipeline_tree(decorate(len).add(1))
        assert str(tree.label) == "decorate(len)"
        assert [str(node.label) for node in tree.children] == ["add(1)"]

    def test_plain_callable(self):
        tree = pipeline_tree(len)
        assert str(tree.label) == "decorate(len)"
        assert tree.children == []

    def test_nested_function_step(self):
        tree = pipeline_tree(It.run_if_truthy(len))
        assert [str(node.label) for node in tree.children[0].children] == ["compose(len)"]


class TestPrintPipeline:

    def test_render_text(self):
        text = render(It.get("people").map_over(It.get("name")).trace("names"))
        assert text.splitlines()[0].strip() == "It"
        assert "map_over(It.get('name'))" in text
        assert "get('name')" in text
        assert "trace('names')" in text

    def test_render_self(self):
        assert render(Self.get("info")).splitlines()[0].strip() == "Self"
