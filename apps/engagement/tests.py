from datetime import date, timedelta
from unittest.mock import patch
from django.test import TestCase, Client

from apps.identity.models import User
from .models import Activity
from . import services
from .tasks import reset_stale_streaks


class StreakTest(TestCase):

    def test_first_activity_starts_streak(self):
        self.assertEqual(services.next_streak(0, None, date(2024, 3, 10)), 1)

    def test_same_day_keeps_streak(self):
        self.assertEqual(services.next_streak(4, date(2024, 3, 10), date(2024, 3, 10)), 4)

    def test_next_day_extends_streak(self):
        self.assertEqual(services.next_streak(4, date(2024, 3, 9), date(2024, 3, 10)), 5)

    def test_gap_restarts_streak(self):
        self.assertEqual(services.next_streak(4, date(2024, 3, 7), date(2024, 3, 10)), 1)


class AwardPointsTest(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='points', password='pw')

    @patch('apps.engagement.services.timezone.localdate')
    def test_consecutive_days_build_streak(self, mock_today):
        mock_today.return_value = date(2024, 3, 9)
        services.award_points(self.user.id, services.POINTS_TASK_STARTED)
        mock_today.return_value = date(2024, 3, 10)
        score = services.award_points(self.user.id, services.POINTS_TASK_COMPLETED)

        self.user.refresh_from_db()
        self.assertEqual(score, 113)
        self.assertEqual(self.user.productivity_streak, 2)
        self.assertEqual(self.user.last_activity_date, date(2024, 3, 10))

    def test_unknown_user(self):
        from uuid import uuid4
        self.assertIsNone(services.award_points(uuid4(), 3))


class ActivityFeedTest(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='feed', password='pw', first_name='Sam')

    def test_record_task_completed(self):
        activity = services.record_task_completed(self.user.id, "Ship it")
        self.assertEqual(activity.user_name, 'Sam')
        self.assertEqual(activity.activity_type, 'task_completed')
        self.assertEqual(activity.points, 100)

    def test_user_without_first_name_is_someone(self):
        nameless = User.objects.create_user(username='nameless', password='pw')
        activity = services.record_task_completed(nameless.id, "Ship it")
        self.assertEqual(activity.user_name, "Someone")

    def test_feed_is_capped(self):
        for i in range(25):
            services.record_task_completed(self.user.id, f"Task {i}")
        self.assertEqual(len(services.get_activity_feed()), 20)

    def test_feed_endpoint(self):
        services.record_task_completed(self.user.id, "Ship it")
        client = Client()
        self.assertEqual(client.get('/api/activity-feed').status_code, 401)

        client.force_login(self.user)
        response = client.get('/api/activity-feed')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[0]['description'], "just completed a task!")


class ResetStaleStreaksTest(TestCase):

    def test_only_stale_streaks_are_reset(self):
        today = date(2024, 3, 10)
        active = User.objects.create_user(
            username='active', password='pw',
            productivity_streak=3, last_activity_date=today - timedelta(days=1),
        )
        stale = User.objects.create_user(
            username='stale', password='pw',
            productivity_streak=5, last_activity_date=today - timedelta(days=3),
        )

        self.assertEqual(services.reset_stale_streaks(today), 1)

        active.refresh_from_db()
        stale.refresh_from_db()
        self.assertEqual(active.productivity_streak, 3)
        self.assertEqual(stale.productivity_streak, 0)

    def test_celery_task_runs_eagerly(self):
        self.assertEqual(reset_stale_streaks.apply().get(), 0)
