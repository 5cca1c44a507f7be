import asyncio
import unittest

from fastapi.testclient import TestClient

from api.main import create_app
from api.services import AppServices
from auth.config import AuthConfig
from auth.security import hash_password
from auth.stores.memory_store import MemoryRateLimiter, MemoryUserStore
from chat.serializer import TRANSIENT_ERROR_MESSAGE, RequestSerializer
from chat.service import ChatService
from fakes import AllowAllRateLimiter, RecordingEmailService, make_auth_service

PENDULUM = "https://lab.example.edu/resources/PHY161/pendulum_setup.jpg"
AC_CIRCUIT = "https://lab.example.edu/resources/PHY260/ac_circuit.jpg"
MANUAL = "https://lab.example.edu/resources/PHY161/manual.pdf"


class ApiTestCase(unittest.TestCase):
    rate_limiter_class = AllowAllRateLimiter

    def setUp(self):
        self.email = RecordingEmailService()
        self.users = MemoryUserStore()
        self.prompts = []
        self.generate_error = None

        async def generate(prompt):
            self.prompts.append(prompt)
            if self.generate_error:
                raise self.generate_error
            return f"Here is the setup: 🖼️ [Pendulum]({PENDULUM})"

        services = AppServices(
            auth_service=make_auth_service(email_service=self.email, user_store=self.users),
            chat_service=ChatService(
                serializer=RequestSerializer(generate, cooldown_seconds=0, call_timeout_seconds=5),
                corpus=[PENDULUM, AC_CIRCUIT, MANUAL],
            ),
            rate_limiter=self.rate_limiter_class(),
        )
        self.client = TestClient(create_app(services), raise_server_exceptions=False)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def signup(self, email="a@x.com", password="secret1", name="A"):
        response = self.client.post("/auth/send-otp", json={"email": email})
        self.assertEqual(response.status_code, 200, response.text)
        code = self.email.last_code(email)

        response = self.client.post("/auth/verify-otp", json={"email": email, "otp": code})
        self.assertEqual(response.status_code, 200, response.text)

        return self.client.post(
            "/auth/register",
            json={"name": name, "email": email, "password": password, "otp": code},
        )


class TestAuthRoutes(ApiTestCase):
    def test_register_and_verify_session(self):
        response = self.signup()

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["user"]["email"], "a@x.com")
        self.assertTrue(body["user"]["isVerified"])

        response = self.client.get(
            "/auth/verify", headers={"Authorization": f"Bearer {body['token']}"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["email"], "a@x.com")
        self.assertTrue(response.json()["valid"])

    def test_register_existing_email_conflicts(self):
        self.assertEqual(self.signup().status_code, 201)

        self.client.post("/auth/resend-otp", json={"email": "a@x.com"})
        response = self.client.post(
            "/auth/register",
            json={
                "name": "A",
                "email": "a@x.com",
                "password": "secret1",
                "otp": self.email.last_code("a@x.com"),
            },
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Email already registered"})

    def test_wrong_code(self):
        self.client.post("/auth/send-otp", json={"email": "a@x.com"})
        code = self.email.last_code("a@x.com")
        wrong = "000000" if code != "000000" else "111111"

        response = self.client.post("/auth/verify-otp", json={"email": "a@x.com", "otp": wrong})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Invalid verification code")

    def test_login(self):
        self.signup()

        response = self.client.post("/auth/login", json={"email": "a@x.com", "password": "secret1"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Login successful")

        wrong = self.client.post("/auth/login", json={"email": "a@x.com", "password": "nope-nope"})
        unknown = self.client.post("/auth/login", json={"email": "b@x.com", "password": "secret1"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())

    def test_login_unverified(self):
        asyncio.run(
            self.users.create_user(
                {
                    "email": "new@x.com",
                    "name": "New",
                    "hashed_password": hash_password("secret1", rounds=4),
                    "is_verified": False,
                }
            )
        )

        response = self.client.post("/auth/login", json={"email": "new@x.com", "password": "secret1"})

        self.assertEqual(response.status_code, 401)
        self.assertTrue(response.json()["needsVerification"])

    def test_login_code_for_unknown_email(self):
        response = self.client.post("/auth/send-otp", json={"email": "b@x.com", "purpose": "login"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.email.sent, [])

    def test_verify_without_token(self):
        response = self.client.get("/auth/verify")
        self.assertEqual(response.status_code, 401)
        self.assertIn("error", response.json())

    def test_verify_with_bad_token(self):
        response = self.client.get("/auth/verify", headers={"Authorization": "Bearer garbage"})
        self.assertEqual(response.status_code, 401)

    def test_malformed_body_is_400_with_fields(self):
        response = self.client.post("/auth/register", json={"email": "not-an-email"})

        self.assertEqual(response.status_code, 400)
        fields = {item["field"] for item in response.json()["fields"]}
        self.assertTrue({"name", "email", "password", "otp"} <= fields)

    def test_failed_delivery_is_500(self):
        self.email.fail = True
        response = self.client.post("/auth/send-otp", json={"email": "a@x.com"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "Failed to send verification code")


class TestRateLimits(ApiTestCase):
    rate_limiter_class = MemoryRateLimiter

    def test_send_code_is_rate_limited(self):
        limit = AuthConfig.SEND_CODE_RATE_LIMIT_PER_MINUTE
        for _ in range(limit):
            response = self.client.post("/auth/send-otp", json={"email": "a@x.com"})
            self.assertEqual(response.status_code, 200)

        response = self.client.post("/auth/send-otp", json={"email": "a@x.com"})
        self.assertEqual(response.status_code, 429)


class TestChatRoute(ApiTestCase):
    def test_answer(self):
        response = self.client.post("/chat", json={"prompt": "show me the pendulum image for phy 161"})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertIn("chat-image", body["message"])
        self.assertIn("<style>", body["styles"])

        prompt = self.prompts[0]
        self.assertLess(prompt.index(PENDULUM), prompt.index(MANUAL))
        self.assertLess(prompt.index(MANUAL), prompt.index(AC_CIRCUIT))

    def test_empty_prompt(self):
        for payload in ({"prompt": "   "}, {}):
            response = self.client.post("/chat", json=payload)
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json(), {"error": True, "message": "Please enter a message"})
        self.assertEqual(self.prompts, [])

    def test_invalid_prompt_uses_chat_error_shape(self):
        for payload in ({"prompt": "x" * 4001}, {"prompt": 5}):
            response = self.client.post("/chat", json=payload)

            self.assertEqual(response.status_code, 400)
            body = response.json()
            self.assertIs(body["error"], True)
            self.assertIn("prompt", body["message"])
            self.assertNotIn("fields", body)
        self.assertEqual(self.prompts, [])

    def test_generation_failure(self):
        self.generate_error = RuntimeError("quota exceeded")

        response = self.client.post("/chat", json={"prompt": "pendulum"})

        self.assertEqual(response.status_code, 500)
        body = response.json()
        self.assertTrue(body["error"])
        self.assertEqual(body["message"], TRANSIENT_ERROR_MESSAGE)


class TestHealth(ApiTestCase):
    def test_health(self):
        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")
        self.assertIn("apiKeyPresent", response.json())

    def test_unknown_route(self):
        response = self.client.get("/nope")
        self.assertEqual(response.status_code, 404)
        self.assertIn("error", response.json())


if __name__ == "__main__":
    unittest.main()
