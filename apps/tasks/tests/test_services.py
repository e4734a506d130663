"""
Unit tests for task services.
Covers creation, status transitions, the event log and the catalyst lifecycle.
"""
from datetime import timedelta
from unittest.mock import MagicMock
from uuid import uuid4
from django.test import TestCase
from django.utils import timezone

from apps.identity.models import User
from apps.engagement.models import Activity
from apps.intelligence.catalyst import CatalystGenerator
from apps.intelligence.dtos import CatalystResultDTO, CatalystSource
from apps.tasks.models import Task, Catalyst, TaskEvent, TaskStatus
from apps.tasks import services


def offline_generator():
    """Generator without a client; always answers from the keyword table."""
    return CatalystGenerator(client=None)


class TaskServiceTestCase(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username='taylor',
            password='testpass123',
            first_name='Taylor',
            interests=['writing', 'fitness', 'music'],
        )

    def _create(self, title="Write quarterly report", **kwargs):
        kwargs.setdefault('generator', offline_generator())
        return services.create_task(user_id=self.user.id, title=title, **kwargs)


class CreateTaskTest(TaskServiceTestCase):

    def test_create_task_persists_task_catalyst_and_initial_event(self):
        created = self._create()

        self.assertEqual(created.task.status, TaskStatus.NOT_STARTED)
        self.assertEqual(created.task.category, 'personal')
        self.assertEqual(created.task.priority, 'medium')
        self.assertEqual(created.catalyst.task_id, created.task.id)
        self.assertEqual(created.catalyst.source, CatalystSource.FALLBACK)
        self.assertEqual(
            created.catalyst.content,
            "Open a blank document and write just the title and today's date",
        )

        self.assertEqual(Task.objects.count(), 1)
        self.assertEqual(Catalyst.objects.count(), 1)
        event = TaskEvent.objects.get(task_id=created.task.id)
        self.assertFalse(event.task_started)
        self.assertFalse(event.task_completed)
        self.assertFalse(event.catalyst_completed)

    def test_create_task_records_matched_interests(self):
        created = self._create(title="Writing a blog post")
        self.assertEqual(created.catalyst.matched_interests, ['writing'])
        self.assertEqual(created.catalyst.relevance_score, 33)

    def test_create_task_passes_fields_to_generator(self):
        generator = MagicMock()
        generator.generate_catalyst.return_value = CatalystResultDTO(
            content="Open the spreadsheet",
            estimated_minutes=2,
        )

        created = self._create(
            title="Budget review",
            description="Q3 numbers",
            category="work",
            priority="high",
            generator=generator,
        )

        request = generator.generate_catalyst.call_args[0][0]
        self.assertEqual(request.task_title, "Budget review")
        self.assertEqual(request.task_description, "Q3 numbers")
        self.assertEqual(request.category, "work")
        self.assertEqual(request.priority, "high")
        self.assertEqual(
            generator.generate_catalyst.call_args[1]['interests'],
            ['writing', 'fitness', 'music'],
        )
        self.assertEqual(created.catalyst.source, CatalystSource.AI)
        self.assertEqual(created.catalyst.estimated_minutes, 2)

    def test_list_tasks_newest_first_with_catalyst(self):
        first = self._create(title="Call the bank")
        second = self._create(title="Go for a run")
        Task.objects.filter(id=first.task.id).update(created_at=timezone.now() - timedelta(hours=1))

        tasks = services.list_tasks(self.user.id)

        self.assertEqual([t.id for t in tasks], [second.task.id, first.task.id])
        self.assertEqual(tasks[0].catalyst.id, second.catalyst.id)

    def test_list_tasks_only_returns_own_tasks(self):
        self._create()
        self.assertEqual(services.list_tasks(uuid4()), [])

    def test_get_task_for_other_user_is_none(self):
        created = self._create()
        self.assertIsNone(services.get_task(created.task.id, uuid4()))


class TaskStatusTransitionTest(TaskServiceTestCase):

    def test_start_appends_started_event_and_awards_points(self):
        created = self._create()

        task = services.update_task_status(created.task.id, self.user.id, TaskStatus.IN_PROGRESS)

        self.assertEqual(task.status, TaskStatus.IN_PROGRESS)
        self.assertIsNone(task.completed_at)
        started = TaskEvent.objects.filter(task_id=created.task.id, task_started=True)
        self.assertEqual(started.count(), 1)
        self.assertEqual(started.first().time_to_start, 0)

        self.user.refresh_from_db()
        self.assertEqual(self.user.productivity_score, 103)
        self.assertEqual(self.user.productivity_streak, 1)

    def test_time_to_start_is_whole_minutes_since_creation(self):
        created = self._create()
        Task.objects.filter(id=created.task.id).update(
            created_at=timezone.now() - timedelta(minutes=12, seconds=50)
        )

        services.update_task_status(created.task.id, self.user.id, TaskStatus.IN_PROGRESS)

        event = TaskEvent.objects.get(task_id=created.task.id, task_started=True)
        self.assertEqual(event.time_to_start, 12)

    def test_complete_stamps_completed_at_and_feeds_activity(self):
        created = self._create()
        services.update_task_status(created.task.id, self.user.id, TaskStatus.IN_PROGRESS)

        task = services.update_task_status(created.task.id, self.user.id, TaskStatus.COMPLETED)

        self.assertEqual(task.status, TaskStatus.COMPLETED)
        self.assertIsNotNone(task.completed_at)
        self.assertEqual(
            TaskEvent.objects.filter(task_id=created.task.id, task_completed=True).count(),
            1,
        )
        self.user.refresh_from_db()
        self.assertEqual(self.user.productivity_score, 113)

        activity = Activity.objects.get()
        self.assertEqual(activity.user_name, 'Taylor')
        self.assertEqual(activity.description, "just completed a task!")

    def test_skip_straight_to_completed(self):
        created = self._create()

        services.update_task_status(created.task.id, self.user.id, TaskStatus.COMPLETED)

        events = TaskEvent.objects.filter(task_id=created.task.id)
        self.assertEqual(events.count(), 2)
        self.assertEqual(events.filter(task_completed=True).count(), 1)
        self.assertEqual(events.filter(task_started=True).count(), 0)

    def test_repeating_current_status_is_a_no_op(self):
        created = self._create()
        services.update_task_status(created.task.id, self.user.id, TaskStatus.IN_PROGRESS)

        services.update_task_status(created.task.id, self.user.id, TaskStatus.IN_PROGRESS)

        self.assertEqual(TaskEvent.objects.filter(task_id=created.task.id).count(), 2)
        self.user.refresh_from_db()
        self.assertEqual(self.user.productivity_score, 103)

    def test_backward_transition_rejected(self):
        created = self._create()
        services.update_task_status(created.task.id, self.user.id, TaskStatus.COMPLETED)

        with self.assertRaises(ValueError):
            services.update_task_status(created.task.id, self.user.id, TaskStatus.IN_PROGRESS)

        self.assertEqual(Task.objects.get(id=created.task.id).status, TaskStatus.COMPLETED)

    def test_invalid_status_rejected(self):
        created = self._create()
        with self.assertRaisesMessage(ValueError, "Invalid status"):
            services.update_task_status(created.task.id, self.user.id, 'paused')

    def test_unknown_task_returns_none(self):
        self.assertIsNone(
            services.update_task_status(uuid4(), self.user.id, TaskStatus.IN_PROGRESS)
        )

    def test_delete_removes_catalysts_and_keeps_events(self):
        created = self._create()

        self.assertTrue(services.delete_task(created.task.id, self.user.id))

        self.assertFalse(Task.objects.filter(id=created.task.id).exists())
        self.assertFalse(Catalyst.objects.filter(task_id=created.task.id).exists())
        self.assertTrue(TaskEvent.objects.filter(task_id=created.task.id).exists())

    def test_delete_other_users_task_fails(self):
        created = self._create()
        self.assertFalse(services.delete_task(created.task.id, uuid4()))
        self.assertTrue(Task.objects.filter(id=created.task.id).exists())


class CatalystLifecycleTest(TaskServiceTestCase):

    def setUp(self):
        super().setUp()
        self.created = self._create()
        self.catalyst_id = self.created.catalyst.id

    def test_regenerate_replaces_catalyst(self):
        generator = MagicMock()
        generator.generate_catalyst.return_value = CatalystResultDTO(
            content="Write one sentence",
            estimated_minutes=1,
        )

        catalyst = services.regenerate_catalyst(self.created.task.id, self.user.id, generator=generator)

        self.assertEqual(catalyst.content, "Write one sentence")
        self.assertEqual(Catalyst.objects.filter(task_id=self.created.task.id).count(), 1)
        self.assertFalse(Catalyst.objects.filter(id=self.catalyst_id).exists())

    def test_regenerate_unknown_task(self):
        self.assertIsNone(services.regenerate_catalyst(uuid4(), self.user.id, generator=offline_generator()))

    def test_complete_catalyst_appends_event_once(self):
        catalyst = services.set_catalyst_completion(self.catalyst_id, self.user.id, True)
        self.assertTrue(catalyst.completed)
        self.assertIsNotNone(catalyst.completed_at)

        services.set_catalyst_completion(self.catalyst_id, self.user.id, True)

        self.assertEqual(TaskEvent.objects.filter(catalyst_completed=True).count(), 1)
        self.user.refresh_from_db()
        self.assertEqual(self.user.productivity_score, 103)

    def test_uncomplete_catalyst(self):
        services.set_catalyst_completion(self.catalyst_id, self.user.id, True)

        catalyst = services.set_catalyst_completion(self.catalyst_id, self.user.id, False)

        self.assertFalse(catalyst.completed)
        self.assertIsNone(catalyst.completed_at)

    def test_catalyst_of_other_user_is_hidden(self):
        self.assertIsNone(services.set_catalyst_completion(self.catalyst_id, uuid4(), True))
        self.assertIsNone(services.rate_catalyst(self.catalyst_id, uuid4(), 4))

    def test_rate_catalyst(self):
        catalyst = services.rate_catalyst(self.catalyst_id, self.user.id, 4)
        self.assertEqual(catalyst.rating, 4)
        self.assertEqual(Catalyst.objects.get(id=self.catalyst_id).rating, 4)

    def test_rating_out_of_range(self):
        for rating in (0, 6, -1):
            with self.assertRaises(ValueError):
                services.rate_catalyst(self.catalyst_id, self.user.id, rating)
