from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.tests.factories import NotificationFactory, UserFactory
from notifications.models import Notification


class NotificationViewIntegrationTest(TestCase):
    def setUp(self):
        container.reset()
        self.client = APIClient()
        self.user = UserFactory()
        self.other = UserFactory()
        self.client.force_authenticate(user=self.user)

    def tearDown(self):
        container.reset()

    def test_list_requires_authentication(self):
        self.client.force_authenticate(user=None)

        response = self.client.get(reverse("notifications:notification-list"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_and_unread_filter(self):
        NotificationFactory(user=self.user)
        NotificationFactory(user=self.user, is_read=True)
        NotificationFactory(user=self.other)

        response = self.client.get(reverse("notifications:notification-list"), {"unread_only": "true"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["data"]["notifications"]), 1)
        self.assertEqual(response.data["data"]["unread_count"], 1)

    def test_count(self):
        NotificationFactory.create_batch(2, user=self.user)

        response = self.client.get(reverse("notifications:notification-count"))

        self.assertEqual(response.data["data"], {"unread_count": 2, "total_count": 2})

    def test_mark_read(self):
        mine = NotificationFactory(user=self.user)
        theirs = NotificationFactory(user=self.other)

        ok = self.client.put(reverse("notifications:notification-read", kwargs={"pk": mine.id}))
        denied = self.client.put(reverse("notifications:notification-read", kwargs={"pk": theirs.id}))
        missing = self.client.put(reverse("notifications:notification-read", kwargs={"pk": 999999}))

        self.assertEqual(ok.status_code, status.HTTP_200_OK)
        self.assertTrue(ok.data["data"]["is_read"])
        self.assertEqual(denied.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)

    def test_mark_all_read(self):
        NotificationFactory.create_batch(3, user=self.user)

        response = self.client.put(reverse("notifications:notification-mark-all-read"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["updated"], 3)
        self.assertFalse(Notification.objects.filter(user=self.user, is_read=False).exists())

    def test_delete_one_and_all(self):
        first, second = NotificationFactory.create_batch(2, user=self.user)
        theirs = NotificationFactory(user=self.other)

        denied = self.client.delete(reverse("notifications:notification-detail", kwargs={"pk": theirs.id}))
        deleted = self.client.delete(reverse("notifications:notification-detail", kwargs={"pk": first.id}))
        cleared = self.client.delete(reverse("notifications:notification-delete-all"))

        self.assertEqual(denied.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(deleted.status_code, status.HTTP_200_OK)
        self.assertEqual(cleared.data["data"]["deleted"], 1)
        self.assertEqual(list(Notification.objects.values_list("id", flat=True)), [theirs.id])
