"""
Unit Tests for attachment and profile picture handling
"""
import base64
import io

import pytest
from PIL import Image

from complaint_desk.config import MAX_ATTACHMENT_BYTES, MAX_PROFILE_PICTURE_BYTES
from complaint_desk.core.exceptions import ValidationError
from complaint_desk.utils.attachments import (
    build_attachment,
    resize_profile_picture,
    to_data_url,
)


def image_bytes(width: int, height: int, fmt: str = 'PNG') -> bytes:
    buffer = io.BytesIO()
    Image.new('RGB', (width, height), color=(10, 120, 200)).save(buffer, format=fmt)
    return buffer.getvalue()


def decode_picture(data_url: str) -> Image.Image:
    header, encoded = data_url.split(',', 1)
    assert header == 'data:image/jpeg;base64'
    return Image.open(io.BytesIO(base64.b64decode(encoded)))


class TestAttachment:
    def test_inlines_content(self):
        attachment = build_attachment('notes.txt', b'hello', 'text/plain')

        assert attachment.name == 'notes.txt'
        assert attachment.size == 5
        assert attachment.type == 'text/plain'
        assert attachment.data_url == 'data:text/plain;base64,aGVsbG8='

    def test_missing_type_defaults_to_binary(self):
        attachment = build_attachment('blob', b'\x00\x01', '')
        assert attachment.data_url.startswith('data:application/octet-stream;base64,')

    def test_limit_is_inclusive(self):
        attachment = build_attachment('big.bin', b'x' * MAX_ATTACHMENT_BYTES)
        assert attachment.size == MAX_ATTACHMENT_BYTES

    def test_over_limit_rejected(self):
        with pytest.raises(ValidationError, match='under 5MB'):
            build_attachment('big.bin', b'x' * (MAX_ATTACHMENT_BYTES + 1))


class TestProfilePicture:
    def test_wide_image_fits_box(self):
        picture = decode_picture(resize_profile_picture(image_bytes(1000, 500), 'image/png'))
        assert picture.size == (400, 200)

    def test_tall_image_fits_box(self):
        picture = decode_picture(resize_profile_picture(image_bytes(300, 900), 'image/png'))
        assert picture.size == (133, 400)

    def test_small_image_not_enlarged(self):
        picture = decode_picture(resize_profile_picture(image_bytes(120, 80, 'JPEG'), 'image/jpeg'))
        assert picture.size == (120, 80)

    def test_non_image_type_rejected(self):
        with pytest.raises(ValidationError, match='valid image file'):
            resize_profile_picture(b'abc', 'text/plain')

    def test_oversized_rejected(self):
        with pytest.raises(ValidationError, match='under 10MB'):
            resize_profile_picture(b'x' * (MAX_PROFILE_PICTURE_BYTES + 1), 'image/png')

    def test_undecodable_rejected(self):
        with pytest.raises(ValidationError, match='Failed to load image'):
            resize_profile_picture(b'not really a png', 'image/png')


def test_to_data_url():
    assert to_data_url(b'abc', 'text/plain') == 'data:text/plain;base64,YWJj'
