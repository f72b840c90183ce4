"""Tests for the flat-file artifact store."""

import threading

import pytest

from cmdbox.registry.errors import (
    CommandExistsError,
    CommandNotFoundError,
    CommandValidationError,
)
from cmdbox.registry.store import ArtifactStore
from cmdbox.schemas import Language


class TestCreate:
    """Tests for ArtifactStore.create."""

    def test_creates_file_with_exact_bytes(self, store, commands_dir):
        content = b"print('hi')\n\x00\xff"
        artifact = store.create("greet.py", content)

        assert artifact.name == "greet.py"
        assert artifact.stem == "greet"
        assert artifact.language == Language.PY
        assert artifact.path == commands_dir / "greet.py"
        assert artifact.path.read_bytes() == content

    def test_creates_missing_directory(self, tmp_path):
        store = ArtifactStore(tmp_path / "nested" / "commands")
        store.create("a.js", b"")
        assert (tmp_path / "nested" / "commands" / "a.js").exists()

    def test_rejects_existing_name(self, store):
        store.create("greet.py", b"first")

        with pytest.raises(CommandExistsError, match="greet.py already exists"):
            store.create("greet.py", b"second")

        assert store.resolve_existing_path("greet").path.read_bytes() == b"first"

    def test_rejects_same_stem_other_language(self, store):
        """One artifact per stem, whatever the extension."""
        store.create("greet.js", b"console.log(1)")

        with pytest.raises(CommandExistsError):
            store.create("greet.py", b"print(1)")

    def test_rejects_unqualified_name(self, store):
        with pytest.raises(CommandValidationError):
            store.create("greet", b"")

    def test_rejects_traversal(self, store):
        with pytest.raises(CommandValidationError):
            store.create("../escape.py", b"")

    def test_concurrent_creates_one_winner(self, store):
        """Exactly one of many simultaneous creators succeeds."""
        barrier = threading.Barrier(8)
        results = []

        def _create(i):
            barrier.wait()
            try:
                store.create("race.py", f"# writer {i}".encode())
                results.append("created")
            except CommandExistsError:
                results.append("exists")

        threads = [threading.Thread(target=_create, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("created") == 1
        assert results.count("exists") == 7


class TestExistsAndDelete:
    """Tests for exists and delete."""

    def test_exists(self, store):
        assert not store.exists("greet.py")
        store.create("greet.py", b"")
        assert store.exists("greet.py")

    def test_exists_probes_both_extensions(self, store):
        store.create("greet.js", b"")
        assert store.exists("greet.py")

    def test_delete(self, store):
        store.create("greet.py", b"")
        store.delete("greet.py")
        assert not store.exists("greet.py")

    def test_delete_missing_is_noop(self, store):
        store.delete("never.py")


class TestResolveExistingPath:
    """Tests for resolve_existing_path."""

    def test_bare_name(self, store):
        store.create("greet.py", b"")
        artifact = store.resolve_existing_path("greet")
        assert artifact.name == "greet.py"
        assert artifact.language == Language.PY

    def test_qualified_name(self, store):
        store.create("greet.js", b"")
        assert store.resolve_existing_path("greet.js").language == Language.JS

    def test_qualified_name_wrong_extension(self, store):
        store.create("greet.js", b"")
        with pytest.raises(CommandNotFoundError):
            store.resolve_existing_path("greet.py")

    def test_case_insensitive(self, store):
        store.create("greet.py", b"")
        assert store.resolve_existing_path("GREET").name == "greet.py"

    def test_js_probed_before_py(self, store, commands_dir):
        """Files placed externally under both extensions resolve to JS."""
        commands_dir.mkdir(parents=True)
        (commands_dir / "dup.py").write_text("print(1)")
        (commands_dir / "dup.js").write_text("console.log(1)")

        assert store.resolve_existing_path("dup").name == "dup.js"

    def test_not_found(self, store):
        with pytest.raises(CommandNotFoundError, match="Command missing does not exist"):
            store.resolve_existing_path("missing")


class TestListArtifacts:
    """Tests for list_artifacts."""

    def test_missing_directory(self, store):
        assert store.list_artifacts() == []

    def test_lists_sorted_and_skips_foreign_files(self, store, commands_dir):
        store.create("zeta.py", b"")
        store.create("alpha.js", b"")
        (commands_dir / "notes.txt").write_text("ignore")
        (commands_dir / "Bad Name.py").write_text("ignore")
        (commands_dir / "subdir.py").mkdir()

        names = [a.name for a in store.list_artifacts()]
        assert names == ["alpha.js", "zeta.py"]

    def test_read_bytes(self, store):
        artifact = store.create("greet.py", b"print('hi')")
        assert store.read_bytes(artifact) == b"print('hi')"


class TestLock:
    """Tests for the per-stem lock table."""

    def test_entries_released(self, store):
        with store.lock("greet"):
            with store.lock("greet"):
                assert "greet" in store._locks
        assert store._locks == {}

    def test_create_leaves_no_entries(self, store):
        for i in range(5):
            store.create(f"cmd{i}.py", b"")
        assert store._locks == {}

    def test_released_after_error(self, store):
        with pytest.raises(CommandExistsError):
            store.create("dup.py", b"")
            store.create("dup.py", b"")
        assert store._locks == {}
