"""Tests for the JSON field updater."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from hyperip.errors import InvalidTargetJSONError, IOFailureError
from hyperip.target import ensure_target, update_json_field


def test_ensure_target_creates_empty_object(tmp_path: Path) -> None:
    fpath = tmp_path / 'nested' / 'dir' / 'vm.json'
    assert ensure_target(fpath) is True
    assert json.loads(fpath.read_text(encoding='utf-8')) == {}
    fpath.write_text('{"keep": 1}', encoding='utf-8')
    assert ensure_target(fpath) is False
    assert json.loads(fpath.read_text(encoding='utf-8')) == {'keep': 1}


def test_update_preserves_siblings_and_is_idempotent(tmp_path: Path) -> None:
    fpath = tmp_path / 'vm.json'
    original = {'name': 'box', 'nested': {'a': [1, 2, None]}, 'ip': 'old'}
    fpath.write_text(json.dumps(original), encoding='utf-8')

    update_json_field(fpath, 'ip', '10.0.0.5')
    first = json.loads(fpath.read_text(encoding='utf-8'))
    assert first == {**original, 'ip': '10.0.0.5'}

    update_json_field(fpath, 'ip', '10.0.0.5')
    second = json.loads(fpath.read_text(encoding='utf-8'))
    assert second == first


def test_update_writes_pretty_json(tmp_path: Path) -> None:
    fpath = tmp_path / 'vm.json'
    fpath.write_text('{}', encoding='utf-8')
    update_json_field(fpath, 'ip', '')
    assert fpath.read_text(encoding='utf-8') == '{\n  "ip": ""\n}'


@pytest.mark.parametrize('text', ['[1, 2, 3]', '42', '"ip"', 'null', '{not json'])
def test_update_rejects_non_object_without_writing(
    tmp_path: Path, text: str
) -> None:
    fpath = tmp_path / 'vm.json'
    fpath.write_text(text, encoding='utf-8')
    with pytest.raises(InvalidTargetJSONError):
        update_json_field(fpath, 'ip', '10.0.0.5')
    assert fpath.read_text(encoding='utf-8') == text


def test_update_rejects_undecodable_bytes(tmp_path: Path) -> None:
    fpath = tmp_path / 'vm.json'
    raw = b'{"a": "\xff"}'
    fpath.write_bytes(raw)
    with pytest.raises(InvalidTargetJSONError):
        update_json_field(fpath, 'ip', '10.0.0.5')
    assert fpath.read_bytes() == raw


def test_update_keeps_non_ascii_text(tmp_path: Path) -> None:
    fpath = tmp_path / 'vm.json'
    fpath.write_text('{"name": "café"}', encoding='utf-8')
    update_json_field(fpath, 'ip', '10.0.0.5')
    text = fpath.read_text(encoding='utf-8')
    assert '"café"' in text
    assert '\\u00e9' not in text


def test_ensure_target_parent_is_file(tmp_path: Path) -> None:
    blocker = tmp_path / 'afile'
    blocker.write_text('x', encoding='utf-8')
    with pytest.raises(IOFailureError):
        ensure_target(blocker / 'vm.json')
    assert blocker.read_text(encoding='utf-8') == 'x'


def test_update_write_failure_keeps_original(tmp_path: Path, monkeypatch) -> None:
    fpath = tmp_path / 'vm.json'
    fpath.write_text('{"ip": "old"}', encoding='utf-8')

    def fail_write(self, *args, **kwargs):
        raise PermissionError(13, 'Permission denied', str(self))

    monkeypatch.setattr(Path, 'write_text', fail_write)
    with pytest.raises(IOFailureError, match='Failed to write updated JSON'):
        update_json_field(fpath, 'ip', '10.0.0.5')
    monkeypatch.undo()
    assert fpath.read_text(encoding='utf-8') == '{"ip": "old"}'
