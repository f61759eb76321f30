import unittest
from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient

from greenpath.auth.accessControl import Requester
from greenpath.config import Settings
from greenpath.db.database import createDbEngine, createSessionFactory, createTables
from greenpath.db.userUtils import promoteToAdmin
from greenpath.main import createApp
from greenpath.models.tour import Tour
from greenpath.models.user import Role, User


def makeSettings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        BCRYPT_ROUNDS=4,
        JWT_SECRET_KEY="test-secret",
        CREATE_TABLES=True,
        LOG_LEVEL="WARNING",
    )


class ServiceTestCase(unittest.TestCase):
    """Runs service functions directly against an in-memory database."""

    def setUp(self):
        self.engine = createDbEngine("sqlite://")
        createTables(self.engine)
        self.db = createSessionFactory(self.engine)()

        self.admin = self._createUser("admin@example.com", Role.ADMIN)
        self.alice = self._createUser("alice@example.com")
        self.bob = self._createUser("bob@example.com")

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _createUser(self, email, role=Role.USER):
        user = User(email=email, password="x", first_name="Test", last_name="User", role=role)
        self.db.add(user)
        self.db.commit()
        return user

    def _requester(self, user):
        return Requester(userId=user.id, role=user.role)

    def _createTour(self, maxCapacity=10, price="100.00", isActive=True):
        tour = Tour(
            title="Rainforest Canopy Walk",
            description="Guided walk through the canopy.",
            destination="Monteverde, Costa Rica",
            price=Decimal(price),
            duration=3,
            max_capacity=maxCapacity,
            start_date=date(2026, 12, 1),
            end_date=date(2026, 12, 4),
            is_active=isActive,
        )
        self.db.add(tour)
        self.db.commit()
        return tour


class ApiTestCase(unittest.TestCase):
    """A fresh application and database per test."""

    def setUp(self):
        self.app = createApp(makeSettings())
        self.client = TestClient(self.app)

        self.adminToken = self._registerAdmin("admin@example.com")
        self.aliceToken = self._register("alice@example.com")["token"]
        self.bobToken = self._register("bob@example.com")["token"]

    def tearDown(self):
        self.client.close()
        self.app.state.engine.dispose()

    def _register(self, email, password="secret123", firstName="Test", lastName="User"):
        response = self.client.post("/api/auth/register", json={
            "email": email,
            "password": password,
            "firstName": firstName,
            "lastName": lastName,
        })
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def _registerAdmin(self, email):
        token = self._register(email)["token"]
        db = self.app.state.sessionFactory()
        try:
            promoteToAdmin(db, email)
        finally:
            db.close()
        return token

    def _headers(self, token):
        return {"Authorization": f"Bearer {token}"}

    def _createTour(self, **overrides):
        payload = {
            "title": "Rainforest Canopy Walk",
            "description": "Guided walk through the canopy.",
            "destination": "Monteverde, Costa Rica",
            "price": 100,
            "duration": 3,
            "maxCapacity": 10,
            "startDate": "2026-12-01",
            "endDate": "2026-12-04",
        }
        payload.update(overrides)
        response = self.client.post("/api/tours", json=payload, headers=self._headers(self.adminToken))
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["tour"]

    def _getTour(self, tourId, token=None):
        response = self.client.get(f"/api/tours/{tourId}", headers=self._headers(token or self.adminToken))
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def _book(self, token, tourId, numberOfPeople, paymentData=None):
        payload = {"tourId": tourId, "numberOfPeople": numberOfPeople}
        if paymentData is not None:
            payload["paymentData"] = paymentData
        return self.client.post("/api/bookings", json=payload, headers=self._headers(token))
