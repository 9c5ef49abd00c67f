from __future__ import annotations

import logging
from collections.abc import Collection
from pathlib import Path

from img_tool.codecs.base import DecodeError, EncodeError, ImageCodec
from img_tool.codecs.pillow import PillowCodec
from img_tool.formats import extension_for
from img_tool.output import atomic_write_bytes
from img_tool.paths import disambiguate, map_output_path, path_key
from img_tool.records import FailureReason, FileError, ProcessedRecord
from img_tool.transform import TransformSpec, apply_transforms

LOGGER = logging.getLogger(__name__)


def process_file(
    path: Path,
    spec: TransformSpec,
    output_dir: Path,
    *,
    input_root: Path | None = None,
    codec: ImageCodec | None = None,
    taken: Collection[str] = frozenset(),
) -> ProcessedRecord | FileError:
    """
    Decode `path`, apply `spec` and write the result under `output_dir`.

    Never raises for problems with the file itself: read and decode failures come
    back as an `unreadable` FileError, encode and write failures as `write_failed`.
    `input_root` is the directory the path was discovered under (None for a single
    file input); `taken` holds path keys of outputs already written in this run.
    """
    codec = codec if codec is not None else PillowCodec()

    try:
        data = path.read_bytes()
    except OSError as e:
        return FileError(path, FailureReason.UNREADABLE, f"cannot read file: {e.strerror or e}")

    try:
        image = codec.decode(data)
    except DecodeError as e:
        return FileError(path, FailureReason.UNREADABLE, str(e))

    size_before = len(data)
    del data
    original_format = image.format
    new_format = spec.output_format(original_format)

    try:
        image = apply_transforms(image, spec, codec)
        encoded = codec.encode(image, new_format)
    except EncodeError as e:
        return FileError(path, FailureReason.WRITE_FAILED, str(e))
    except (OSError, ValueError) as e:
        return FileError(path, FailureReason.UNREADABLE, f"cannot transform image: {e}")
    finally:
        image.close()

    output_path = map_output_path(
        output_dir=output_dir,
        input_root=input_root,
        image_path=path,
        suffix=extension_for(new_format),
    )
    output_path = disambiguate(output_path, taken)
    if output_path.resolve() == path.resolve():
        # Never overwrite the source in place.
        output_path = disambiguate(output_path, {*taken, path_key(output_path)})

    try:
        atomic_write_bytes(output_path, encoded)
        size_after = output_path.stat().st_size
    except OSError as e:
        return FileError(path, FailureReason.WRITE_FAILED, f"cannot write {output_path}: {e.strerror or e}")

    LOGGER.debug("%s -> %s (%s -> %s)", path, output_path, original_format, new_format)
    return ProcessedRecord(
        input_path=path,
        output_path=output_path,
        original_format=original_format,
        new_format=new_format,
        size_before_bytes=size_before,
        size_after_bytes=size_after,
    )
