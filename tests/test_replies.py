"""Tests for reply sinks."""

from cmdbox.replies import ConsoleReplySink, RecordingReplySink


class TestConsoleReplySink:
    """Tests for ConsoleReplySink."""

    def test_reply(self, capsys):
        ConsoleReplySink().reply("hello")

        assert capsys.readouterr().out == "hello\n"

    def test_acknowledge_goes_to_stderr(self, capsys):
        sink = ConsoleReplySink()
        handle = sink.acknowledge("Running command: greet")
        sink.retract(handle)

        captured = capsys.readouterr()
        assert captured.err == "Running command: greet\n"
        assert captured.out == ""

    def test_attachment_copied_to_export_dir(self, tmp_path, capsys):
        source = tmp_path / "commands" / "greet.py"
        source.parent.mkdir()
        source.write_bytes(b"print('hi')")
        export_dir = tmp_path / "out"

        ConsoleReplySink(export_dir=export_dir).reply_with_attachment("Exporting command: greet", source)

        assert (export_dir / "greet.py").read_bytes() == b"print('hi')"
        out = capsys.readouterr().out
        assert "Exporting command: greet" in out
        assert str(export_dir / "greet.py") in out

    def test_attachment_into_own_directory(self, tmp_path):
        source = tmp_path / "greet.py"
        source.write_bytes(b"x = 1")

        ConsoleReplySink(export_dir=tmp_path).reply_with_attachment("Exporting", source)

        assert source.read_bytes() == b"x = 1"


class TestRecordingReplySink:
    """Tests for RecordingReplySink."""

    def test_pending_acks(self):
        sink = RecordingReplySink()
        first = sink.acknowledge("one")
        sink.acknowledge("two")
        sink.retract(first)

        assert sink.pending_acks == ["two"]
