import io
import logging
import os
import zipfile
from typing import Union

LOG = logging.getLogger(__name__)


def is_zip_file(content: bytes) -> bool:
    stream = io.BytesIO(content)
    return zipfile.is_zipfile(stream)


def create_zip_content(*paths: Union[str, os.PathLike]) -> bytes:
    """
    Creates an in-memory zip archive of the given files and directories. Files are stored at the archive root,
    directories are added recursively with paths relative to the directory itself.

    :param paths: the files or directories to add
    :return: the bytes of the zip archive
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for path in paths:
            path = os.fspath(path)
            if os.path.isdir(path):
                for root, _, files in sorted(os.walk(path)):
                    for filename in sorted(files):
                        full_path = os.path.join(root, filename)
                        archive.write(full_path, os.path.relpath(full_path, path))
            else:
                archive.write(path, os.path.basename(path))
    return buffer.getvalue()


def load_code_archive(*paths: Union[str, os.PathLike]) -> bytes:
    """
    Returns the deployment archive for the given paths: a single zip file is read verbatim, everything else is
    zipped.

    :param paths: a zip file, or files and directories to zip
    :return: the bytes of the zip archive
    """
    if len(paths) == 1 and os.path.isfile(paths[0]):
        with open(paths[0], "rb") as fd:
            content = fd.read()
        if is_zip_file(content):
            return content
    LOG.debug("Packaging %s into a code archive", ", ".join(os.fspath(p) for p in paths))
    return create_zip_content(*paths)
