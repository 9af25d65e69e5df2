"""
Tests for the stub recorder.
"""

import json

from confdeploy.core.persistence.stubs import Stub, StubRecorder


class TestStubRecorder:
    def test_disabled_without_folder(self):
        recorder = StubRecorder()
        recorder.record(Stub(id="1", name="a"), "dashboard")
        assert not recorder.enabled
        assert recorder.write_all() == []
        assert recorder.write_value("dashboard", "1", "{}") is None

    def test_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CONFDEPLOY_STUBS_FOLDER", str(tmp_path))
        recorder = StubRecorder.from_env()
        assert recorder.enabled
        assert recorder.folder == tmp_path

    def test_from_env_unset(self):
        assert not StubRecorder.from_env().enabled

    def test_write_all_groups_by_type(self, tmp_path):
        recorder = StubRecorder(tmp_path / "stubs")
        recorder.record(Stub(id="1", name="a"), "dashboard")
        recorder.record(Stub(id="2", name="b", entity_id="e-2"), "dashboard")
        recorder.record(Stub(id="3", name="c"), "alerting-profile")

        written = recorder.write_all()
        assert sorted(p.name for p in written) == ["alerting-profile.json", "dashboard.json"]
        data = json.loads((tmp_path / "stubs" / "dashboard.json").read_text())
        assert data == [{"id": "1", "name": "a"}, {"id": "2", "name": "b", "entity_id": "e-2"}]
        assert recorder.types == ["dashboard", "alerting-profile"]

    def test_write_value(self, tmp_path):
        path = StubRecorder(tmp_path).write_value("dashboard", "abc", '{"x": 1}')
        assert path == tmp_path / "dashboard_abc.json"
        assert path.read_text() == '{"x": 1}'

    def test_write_failure_is_logged(self, tmp_path, caplog):
        blocker = tmp_path / "blocked"
        blocker.write_text("")
        recorder = StubRecorder(tmp_path)
        recorder.record(Stub(id="1", name="a"), "blocked/sub")
        assert recorder.write_all() == []
        assert "Failed to write stubs file" in caplog.text

    def test_folder_under_regular_file_is_logged(self, tmp_path, caplog):
        blocker = tmp_path / "file"
        blocker.write_text("")
        recorder = StubRecorder(blocker / "stubs")
        recorder.record(Stub(id="1", name="a"), "dashboard")
        assert recorder.write_all() == []
        assert "Failed to create stubs folder" in caplog.text
