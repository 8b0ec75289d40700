import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import PersistenceError, StorageError, ValidationError
from features.audio.app.use_cases.ingest_audio import (
    AI_GENERATED_LICENSE_TYPE,
    IngestAudioUseCase,
    IngestFields,
    UploadedBlob,
    USER_UPLOADED_LICENSE_TYPE,
    parse_audio_type,
)
from infrastructure.database.models import AudioClipModel
from infrastructure.repositories.audio_clip_repository import AudioClipRepository
from infrastructure.uow import UnitOfWork

AUDIO = UploadedBlob(filename="my track.mp3", content_type="audio/mpeg", data=b"ID3...")
LICENSE = UploadedBlob(filename="license.txt", content_type="text/plain", data=b"licensed")


def _ingest(session, storage, fields, audio=AUDIO, license_file=None):
    use_case = IngestAudioUseCase(AudioClipRepository(session), UnitOfWork(session), storage)
    return asyncio.run(use_case.execute(fields, audio, license_file))


def test_original_sound_needs_no_license(session, storage):
    clip = _ingest(session, storage, IngestFields(title="Door knock", sound_flag="1", type="sound"))
    assert clip.license_url is None
    assert clip.source == "user_uploaded"
    assert clip.license_type == USER_UPLOADED_LICENSE_TYPE
    assert clip.sound_flag == 1
    assert clip.type == "sound"
    assert len(storage.objects) == 1
    key = next(iter(storage.objects))
    assert key.startswith("audio/") and key.endswith("-my_track.mp3")
    assert session.get(AudioClipModel, clip.id) is not None


@pytest.mark.parametrize("flag", [None, "0", "2", "yes", "1.5", "1.9", "0.5"])
def test_licensed_upload_requires_license(session, storage, flag):
    with pytest.raises(ValidationError) as excinfo:
        _ingest(session, storage, IngestFields(sound_flag=flag))
    assert excinfo.value.detail == "license file required"
    assert storage.objects == {}


def test_integral_float_flag_is_original_sound(session, storage):
    clip = _ingest(session, storage, IngestFields(sound_flag="1.0"))
    assert clip.source == "user_uploaded"
    assert clip.sound_flag == 1


def test_fractional_flag_is_stored_as_zero(session, storage):
    clip = _ingest(session, storage, IngestFields(sound_flag="1.5"), license_file=LICENSE)
    assert clip.source == "ai_generated"
    assert clip.sound_flag == 0
    assert clip.license_url is not None


def test_licensed_upload_with_license(session, storage):
    clip = _ingest(session, storage, IngestFields(sound_flag="0"), license_file=LICENSE)
    assert clip.source == "ai_generated"
    assert clip.license_type == AI_GENERATED_LICENSE_TYPE
    assert clip.license_url is not None and "/licenses/" in clip.license_url
    assert clip.usage_notes.startswith("Licensed via Envato MusicGen.")


@pytest.mark.parametrize("flag", ["1", "0"])
def test_missing_audio_always_fails(session, storage, flag):
    with pytest.raises(ValidationError) as excinfo:
        _ingest(session, storage, IngestFields(sound_flag=flag), audio=None, license_file=LICENSE)
    assert excinfo.value.detail == "audio file required"


def test_defaults_and_numeric_parsing(session, storage):
    fields = IngestFields(
        title="  ", duration="abc", priority="7.9", rating="9", download_count="-4", sound_flag="1",
    )
    clip = _ingest(session, storage, fields)
    assert clip.title == "Untitled"
    assert clip.category == "General"
    assert clip.type == "music"
    assert clip.duration == 0
    assert clip.priority == 7
    assert clip.rating == 5.0
    assert clip.download_count == 0
    assert clip.artist_name == "Envato MusicGen AI"
    assert clip.original_audio_url is None


def test_huge_numbers_are_clamped_to_column_range(session, storage):
    fields = IngestFields(duration="1e20", priority="-1e20", download_count="99999999999", sound_flag="1")
    clip = _ingest(session, storage, fields)
    assert clip.duration == 2 ** 31 - 1
    assert clip.priority == -(2 ** 31)
    assert clip.download_count == 2 ** 31 - 1
    assert session.get(AudioClipModel, clip.id).duration == 2 ** 31 - 1


@pytest.mark.parametrize("raw, expected", [
    (None, "music"), ("", "music"), ("FX", "fx"), ("background music", "background-music"),
    ("background_music", "background-music"), ("background-music", "background-music"),
])
def test_parse_audio_type(raw, expected):
    assert parse_audio_type(raw).value == expected


def test_unknown_type_rejected(session, storage):
    with pytest.raises(ValidationError):
        _ingest(session, storage, IngestFields(type="podcast", sound_flag="1"))


def test_storage_failure(session, storage):
    storage.fail = True
    with pytest.raises(StorageError):
        _ingest(session, storage, IngestFields(sound_flag="1"))
    assert session.query(AudioClipModel).count() == 0


def test_persistence_failure_keeps_uploaded_objects(session, storage, monkeypatch):
    repo = AudioClipRepository(session)

    async def broken_add(entity):
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(repo, "add", broken_add)
    use_case = IngestAudioUseCase(repo, UnitOfWork(session), storage)
    with pytest.raises(PersistenceError) as excinfo:
        asyncio.run(use_case.execute(IngestFields(sound_flag="0"), AUDIO, LICENSE))
    assert excinfo.value.detail == "Failed to save audio record"
    assert len(storage.objects) == 2
