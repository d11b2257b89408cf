"""
Unit Tests for the identity directory and the session store
"""
import io

import pytest
from PIL import Image

from complaint_desk.config import SESSION_STORAGE_KEY
from complaint_desk.core.exceptions import ValidationError
from complaint_desk.schemas.user import UserRole
from complaint_desk.utils import user_directory
from complaint_desk.utils.session_manager import SessionStore

from tests.conftest import STUDENT_ID, STUDENT_NAME


def png_bytes(width: int, height: int) -> bytes:
    buffer = io.BytesIO()
    Image.new('RGB', (width, height), color=(200, 30, 30)).save(buffer, format='PNG')
    return buffer.getvalue()


class TestDirectory:
    def test_known_student(self):
        user = user_directory.resolve_student(STUDENT_ID)
        assert user.name == STUDENT_NAME
        assert user.role == UserRole.STUDENT
        assert user.department == 'Computer Science'

    def test_unknown_well_formed_id_gets_placeholder(self):
        user = user_directory.resolve_student('U2023/1234567')
        assert user.name == 'Student 4567'
        assert user.department == 'Undeclared'
        assert user.level == 100
        assert user.email == 'u2023/1234567@student.csd.edu'

    @pytest.mark.parametrize('bad', ['', 'admin01', 'U2023/123456', 'u2023/1234567', 'X2023/1234567'])
    def test_malformed_ids_rejected(self, bad):
        assert user_directory.resolve_student(bad) is None

    def test_resolve_any_admin_is_a_copy(self):
        admin = user_directory.resolve_any('admin01')
        admin.name = 'Changed'
        assert user_directory.resolve_any('admin01').name == 'Dr. Amina Bello'

    def test_resolve_any_placeholder_is_minimal(self):
        user = user_directory.resolve_any('U2023/1234567')
        assert user.name == 'Student 4567'
        assert user.department is None


class TestLogin:
    def test_student_login_persists(self, storage):
        store = SessionStore(storage)

        assert store.login(UserRole.STUDENT, STUDENT_ID) is True
        assert store.user.id == STUDENT_ID
        assert storage.get_item(SESSION_STORAGE_KEY) is not None

    def test_session_restored_on_restart(self, storage):
        SessionStore(storage).login(UserRole.STUDENT, STUDENT_ID)
        restored = SessionStore(storage)
        assert restored.user.name == STUDENT_NAME

    def test_invalid_student_id(self, storage):
        store = SessionStore(storage)
        assert store.login(UserRole.STUDENT, 'not-an-id') is False
        assert store.user is None

    def test_failed_login_keeps_previous_session(self, storage):
        store = SessionStore(storage)
        store.login(UserRole.STUDENT, STUDENT_ID)
        assert store.login(UserRole.ADMIN, 'admin01', username='admin', password='wrong') is False
        assert store.user.id == STUDENT_ID

    def test_admin_login(self, storage):
        store = SessionStore(storage)
        assert store.login(UserRole.ADMIN, 'admin01', username='admin', password='password')
        assert store.user.role == UserRole.ADMIN

    @pytest.mark.parametrize('username,password,user_id', [
        ('admin', 'nope', 'admin01'),
        ('root', 'password', 'admin01'),
        ('admin', 'password', 'admin02'),
    ])
    def test_admin_login_rejected(self, storage, username, password, user_id):
        store = SessionStore(storage)
        assert store.login(UserRole.ADMIN, user_id, username=username, password=password) is False

    def test_none_role_never_logs_in(self, storage):
        assert SessionStore(storage).login(UserRole.NONE, STUDENT_ID) is False

    def test_logout_clears_storage(self, storage):
        store = SessionStore(storage)
        store.login(UserRole.STUDENT, STUDENT_ID)
        store.logout()
        assert store.user is None
        assert storage.get_item(SESSION_STORAGE_KEY) is None
        assert SessionStore(storage).user is None

    def test_corrupt_session_record_means_logged_out(self, storage):
        storage.set_item(SESSION_STORAGE_KEY, '{"role": "superuser"}')
        assert SessionStore(storage).user is None


class TestProfile:
    def test_update_profile(self, storage):
        store = SessionStore(storage)
        store.login(UserRole.STUDENT, STUDENT_ID)

        updated = store.update_profile(name='  Ada O.  ', phone='0800')

        assert updated.name == 'Ada O.'
        assert updated.phone == '0800'
        assert SessionStore(storage).user.phone == '0800'

    def test_id_and_role_are_immutable(self, storage):
        store = SessionStore(storage)
        store.login(UserRole.STUDENT, STUDENT_ID)

        updated = store.update_profile(id='U0000/0000000', role=UserRole.ADMIN, email='a@b.c')

        assert updated.id == STUDENT_ID
        assert updated.role == UserRole.STUDENT
        assert updated.email == 'a@b.c'

    def test_empty_name_rejected(self, storage):
        store = SessionStore(storage)
        store.login(UserRole.STUDENT, STUDENT_ID)
        with pytest.raises(ValidationError, match='Name cannot be empty.'):
            store.update_profile(name='   ')
        assert store.user.name == STUDENT_NAME

    def test_update_without_session(self, storage):
        assert SessionStore(storage).update_profile(name='x') is None

    def test_profile_picture_resized(self, storage):
        store = SessionStore(storage)
        store.login(UserRole.STUDENT, STUDENT_ID)

        user = store.set_profile_picture(png_bytes(800, 200), 'image/png')

        assert user.profile_picture_url.startswith('data:image/jpeg;base64,')

    def test_profile_picture_must_be_image(self, storage):
        store = SessionStore(storage)
        store.login(UserRole.STUDENT, STUDENT_ID)
        with pytest.raises(ValidationError, match='valid image file'):
            store.set_profile_picture(b'%PDF-1.4', 'application/pdf')
