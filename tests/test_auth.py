from unittest.mock import patch

from sqlmodel import select

from schoolhub.auth.auth_handler import verify_password
from schoolhub.configs import settings
from schoolhub.models import User, UserRole
from tests.base import ApiTestCase


class TestRegister(ApiTestCase):

    def test_register_each_role(self):
        for role in ("student", "teacher", "admin"):
            with self.subTest(role=role):
                response = self.client.post("/register", json={
                    "email": f"{role}@x.com", "password": "secret1", "full_name": role.title(), "role": role,
                })
                self.assertEqual(response.status_code, 201)
                with self.session() as db:
                    user = db.exec(select(User).where(User.email == f"{role}@x.com")).one()
                    self.assertEqual(user.role, UserRole(role))

    def test_invalid_role_rejected(self):
        response = self.client.post("/register", json={
            "email": "p@x.com", "password": "secret1", "full_name": "Parent", "role": "parent",
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn("role", response.json()["detail"])
        with self.session() as db:
            self.assertIsNone(db.exec(select(User)).first())

    def test_blank_fields_rejected(self):
        base = {"email": "s@x.com", "password": "secret1", "full_name": "Sam", "role": "student"}
        for field in ("email", "password", "full_name"):
            with self.subTest(field=field):
                response = self.client.post("/register", json={**base, field: "   "})
                self.assertEqual(response.status_code, 400)
        response = self.client.post("/register", json={"email": "s@x.com", "role": "student"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Missing field", response.json()["detail"])

    def test_password_is_hashed(self):
        self.register("s@x.com", "student")
        with self.session() as db:
            user = db.exec(select(User).where(User.email == "s@x.com")).one()
        self.assertNotEqual(user.password, "secret1")
        self.assertNotIn("secret1", user.password)
        self.assertTrue(user.password.startswith("$2"))
        self.assertIn("$10$", user.password)
        self.assertTrue(verify_password("secret1", user.password))

    def test_duplicate_email_rejected(self):
        self.register("s@x.com", "student")
        response = self.client.post("/register", json={
            "email": "s@x.com", "password": "other", "full_name": "Other", "role": "teacher",
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn("UNIQUE", response.json()["detail"].upper())


class TestLogin(ApiTestCase):

    def test_teacher_login_returns_profile_without_password(self):
        self.client.post("/register", json={
            "email": "t@x.com", "password": "secret1", "full_name": "Terry", "role": "teacher",
        })
        response = self.client.post("/login", json={"email": "t@x.com", "password": "secret1"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user"]["role"], "teacher")
        self.assertEqual(set(body["user"]), {"id", "email", "full_name", "role", "created_at"})
        self.assertNotIn("password", response.text)
        self.assertTrue(body["access_token"])

    def test_unknown_email_and_wrong_password_are_distinct(self):
        self.register("t@x.com", "teacher")
        missing = self.client.post("/login", json={"email": "nobody@x.com", "password": "secret1"})
        wrong = self.client.post("/login", json={"email": "t@x.com", "password": "nope"})
        self.assertEqual(missing.status_code, 401)
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(missing.json()["detail"], "User not found")
        self.assertEqual(wrong.json()["detail"], "Wrong password")

    def test_generic_login_errors_switch(self):
        self.register("t@x.com", "teacher")
        with patch.object(settings, "LOGIN_GENERIC_ERRORS", True):
            missing = self.client.post("/login", json={"email": "nobody@x.com", "password": "secret1"})
            wrong = self.client.post("/login", json={"email": "t@x.com", "password": "nope"})
        self.assertEqual(missing.json()["detail"], wrong.json()["detail"])

    def test_refresh_issues_access_token(self):
        self.register("s@x.com", "student")
        tokens = self.login("s@x.com")
        response = self.client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["access_token"])

        bad = self.client.post("/auth/refresh", json={"refresh_token": "garbage"})
        self.assertEqual(bad.status_code, 401)


class TestAdminGuard(ApiTestCase):

    def test_admin_routes_need_admin_token(self):
        self.assertEqual(self.client.get("/admin/users").status_code, 401)

        self.register("s@x.com", "student")
        token = self.login("s@x.com")["access_token"]
        response = self.client.get("/admin/users", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 403)

        response = self.client.get("/admin/users", headers=self.admin_headers())
        self.assertEqual(response.status_code, 200)
        self.assertNotIn("password", response.text)
