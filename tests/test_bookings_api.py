from decimal import Decimal
from uuid import UUID, uuid4

from greenpath.models.booking import Booking, BookingStatus

from support import ApiTestCase


class BookingApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.tour = self._createTour(maxCapacity=10, price=100)

    def _spots(self):
        return self._getTour(self.tour["id"])["availableSpots"]

    def test_requires_token(self):
        response = self.client.post("/api/bookings", json={"tourId": self.tour["id"], "numberOfPeople": 1})
        self.assertEqual(response.status_code, 401)

    def test_fill_tour_to_capacity(self):
        first = self._book(self.aliceToken, self.tour["id"], 6)
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["message"], "Booking created successfully")
        self.assertEqual(first.json()["booking"]["status"], "PENDING")
        self.assertEqual(self._spots(), 4)

        tooMany = self._book(self.bobToken, self.tour["id"], 5)
        self.assertEqual(tooMany.status_code, 400)
        self.assertEqual(tooMany.json(), {
            "error": "CapacityExceeded",
            "detail": "Not enough spots available. Only 4 spots remaining.",
        })

        retry = self._book(self.bobToken, self.tour["id"], 4)
        self.assertEqual(retry.status_code, 201)
        self.assertEqual(retry.json()["booking"]["totalPrice"], 400)
        self.assertEqual(self._spots(), 0)
        self.assertEqual(self._getTour(self.tour["id"])["totalBookings"], 2)

    def test_rejected_booking_persists_nothing(self):
        self._book(self.aliceToken, self.tour["id"], 11)
        bookings = self.client.get("/api/bookings", headers=self._headers(self.adminToken)).json()
        self.assertEqual(bookings, [])

    def test_completed_payment_confirms(self):
        response = self._book(self.aliceToken, self.tour["id"], 2, paymentData={
            "paymentId": "8AB12345CD678901E",
            "paymentStatus": "COMPLETED",
            "paymentMethod": "paypal",
        })
        self.assertEqual(response.status_code, 201)

        booking = response.json()["booking"]
        self.assertEqual(booking["status"], "CONFIRMED")
        self.assertEqual(booking["paymentId"], "8AB12345CD678901E")
        self.assertEqual(booking["paymentMethod"], "paypal")
        self.assertEqual(booking["tour"]["id"], self.tour["id"])
        self.assertEqual(booking["user"]["email"], "alice@example.com")

    def test_incomplete_payment(self):
        response = self._book(self.aliceToken, self.tour["id"], 2, paymentData={
            "paymentId": "X1",
            "paymentStatus": "DECLINED",
            "paymentMethod": "paypal",
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "PaymentIncomplete")

    def test_lowercase_completed_payment(self):
        response = self._book(self.aliceToken, self.tour["id"], 2, paymentData={
            "paymentId": "X2",
            "paymentStatus": "completed",
            "paymentMethod": "paypal",
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "PaymentIncomplete")
        self.assertEqual(self._spots(), 10)

    def test_unknown_tour(self):
        response = self._book(self.aliceToken, str(uuid4()), 1)
        self.assertEqual(response.status_code, 404)

    def test_inactive_tour(self):
        self.client.patch(f"/api/tours/{self.tour['id']}/toggle", headers=self._headers(self.adminToken))
        response = self._book(self.aliceToken, self.tour["id"], 1)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Inactive")

    def test_zero_people_is_rejected(self):
        response = self._book(self.aliceToken, self.tour["id"], 0)
        self.assertEqual(response.status_code, 422)

    def test_list_is_scoped_to_owner(self):
        self._book(self.aliceToken, self.tour["id"], 1)
        self._book(self.bobToken, self.tour["id"], 2)

        mine = self.client.get("/api/bookings", headers=self._headers(self.aliceToken)).json()
        self.assertEqual(len(mine), 1)
        self.assertEqual(mine[0]["user"]["email"], "alice@example.com")

        everything = self.client.get("/api/bookings", headers=self._headers(self.adminToken)).json()
        self.assertEqual(len(everything), 2)

    def test_other_users_booking_is_hidden(self):
        booking = self._book(self.bobToken, self.tour["id"], 2).json()["booking"]
        headers = self._headers(self.aliceToken)

        self.assertEqual(self.client.get(f"/api/bookings/{booking['id']}", headers=headers).status_code, 404)
        self.assertEqual(self.client.put(
            f"/api/bookings/{booking['id']}", json={"numberOfPeople": 1}, headers=headers).status_code, 404)
        self.assertEqual(self.client.delete(f"/api/bookings/{booking['id']}", headers=headers).status_code, 404)

        adminView = self.client.get(f"/api/bookings/{booking['id']}", headers=self._headers(self.adminToken))
        self.assertEqual(adminView.status_code, 200)

    def test_grow_into_last_spot(self):
        mine = self._book(self.aliceToken, self.tour["id"], 2).json()["booking"]
        self._book(self.bobToken, self.tour["id"], 7)

        response = self.client.put(
            f"/api/bookings/{mine['id']}", json={"numberOfPeople": 3}, headers=self._headers(self.aliceToken))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Booking updated successfully")
        self.assertEqual(response.json()["booking"]["numberOfPeople"], 3)
        self.assertEqual(response.json()["booking"]["totalPrice"], 300)
        self.assertEqual(self._spots(), 0)

    def test_grow_past_capacity(self):
        mine = self._book(self.aliceToken, self.tour["id"], 2).json()["booking"]
        self._book(self.bobToken, self.tour["id"], 7)

        response = self.client.put(
            f"/api/bookings/{mine['id']}", json={"numberOfPeople": 4}, headers=self._headers(self.aliceToken))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "CapacityExceeded")

    def test_user_cannot_change_status(self):
        mine = self._book(self.aliceToken, self.tour["id"], 2).json()["booking"]
        response = self.client.put(
            f"/api/bookings/{mine['id']}", json={"status": "CONFIRMED"}, headers=self._headers(self.aliceToken))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"], "Forbidden")

    def test_empty_update(self):
        mine = self._book(self.aliceToken, self.tour["id"], 2).json()["booking"]
        response = self.client.put(f"/api/bookings/{mine['id']}", json={}, headers=self._headers(self.aliceToken))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "ValidationError")

    def test_unknown_status_value(self):
        mine = self._book(self.aliceToken, self.tour["id"], 2).json()["booking"]
        response = self.client.put(
            f"/api/bookings/{mine['id']}", json={"status": "ON_HOLD"}, headers=self._headers(self.adminToken))
        self.assertEqual(response.status_code, 422)

    def test_admin_cancel_frees_spots(self):
        mine = self._book(self.aliceToken, self.tour["id"], 3).json()["booking"]
        self.assertEqual(self._spots(), 7)

        response = self.client.put(
            f"/api/bookings/{mine['id']}", json={"status": "CANCELLED"}, headers=self._headers(self.adminToken))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["booking"]["status"], "CANCELLED")
        self.assertEqual(self._spots(), 10)

    def test_owner_cancel_is_soft(self):
        mine = self._book(self.aliceToken, self.tour["id"], 3).json()["booking"]

        response = self.client.delete(f"/api/bookings/{mine['id']}", headers=self._headers(self.aliceToken))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Booking cancelled successfully")
        self.assertEqual(response.json()["booking"]["status"], "CANCELLED")
        self.assertEqual(self._spots(), 10)

        stillThere = self.client.get(f"/api/bookings/{mine['id']}", headers=self._headers(self.aliceToken))
        self.assertEqual(stillThere.status_code, 200)

    def test_overbooked_tour_reports_zero_spots(self):
        self._book(self.aliceToken, self.tour["id"], 8)

        db = self.app.state.sessionFactory()
        try:
            db.add(Booking(
                tour_id=UUID(self.tour["id"]),
                user_id=db.query(Booking).first().user_id,
                number_of_people=5,
                total_price=Decimal("500.00"),
                status=BookingStatus.CONFIRMED,
            ))
            db.commit()
        finally:
            db.close()

        self.assertEqual(self._spots(), 0)
        response = self._book(self.bobToken, self.tour["id"], 1)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Not enough spots available. Only 0 spots remaining.")
