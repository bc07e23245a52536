"""密码哈希工具测试"""

import pytest
from taskforge.core.security import check_password, hash_password


class TestPasswordHashing:
    """PBKDF2 哈希与校验"""

    def test_hash_and_check(self):
        stored = hash_password("correct horse")
        assert check_password("correct horse", stored) is True
        assert check_password("wrong horse", stored) is False

    def test_salt_is_random(self):
        assert hash_password("same") != hash_password("same")

    def test_format(self):
        salt, digest = hash_password("pw").split(":")
        assert salt and digest

    @pytest.mark.parametrize("password", ["", "   "])
    def test_empty_password_rejected(self, password):
        with pytest.raises(ValueError):
            hash_password(password)

    @pytest.mark.parametrize("stored", ["", "no-separator", "a:b:c", "!!!:???"])
    def test_malformed_stored_hash(self, stored):
        with pytest.raises(ValueError):
            check_password("pw", stored)
