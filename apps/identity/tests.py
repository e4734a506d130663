import json
from django.test import TestCase, Client

from .models import User
from .jwt_auth import create_access_token, create_refresh_token, get_user_id_from_token


class JWTTest(TestCase):
    def test_access_token_round_trip(self):
        user = User.objects.create_user(username="jwt", password="pw")
        token = create_access_token(user.id)
        self.assertEqual(get_user_id_from_token(token), user.id)

    def test_refresh_token_is_not_an_access_token(self):
        user = User.objects.create_user(username="jwt2", password="pw")
        token = create_refresh_token(user.id)
        self.assertIsNone(get_user_id_from_token(token))
        self.assertEqual(get_user_id_from_token(token, token_type='refresh'), user.id)

    def test_garbage_token(self):
        self.assertIsNone(get_user_id_from_token("not-a-token"))


class IdentityAPITest(TestCase):
    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(
            username="alex",
            email="alex@test.com",
            password="testpass123",
            first_name="Alex",
        )

    def test_register_sets_cookies(self):
        response = self.client.post(
            '/api/identity/register',
            data=json.dumps({
                'username': 'newbie',
                'email': 'newbie@test.com',
                'password': 'longenough1',
            }),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn('access_token', response.cookies)
        self.assertIn('refresh_token', response.cookies)
        self.assertEqual(response.json()['user']['subscription_status'], 'free')
        self.assertTrue(User.objects.filter(username='newbie').exists())

    def test_register_duplicate_username(self):
        response = self.client.post(
            '/api/identity/register',
            data=json.dumps({'username': 'alex', 'email': 'x@test.com', 'password': 'longenough1'}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 400)

    def test_login_and_me_with_cookie(self):
        response = self.client.post(
            '/api/identity/login',
            data=json.dumps({'username': 'alex', 'password': 'testpass123'}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 200)

        # The test client keeps the cookies set by the login response
        me = self.client.get('/api/identity/me')
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()['username'], 'alex')
        self.assertEqual(me.json()['productivity_score'], 100)

    def test_login_wrong_password(self):
        response = self.client.post(
            '/api/identity/login',
            data=json.dumps({'username': 'alex', 'password': 'nope'}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 401)

    def test_me_requires_auth(self):
        response = self.client.get('/api/identity/me')
        self.assertEqual(response.status_code, 401)

    def test_refresh_issues_access_token(self):
        self.client.cookies['refresh_token'] = create_refresh_token(self.user.id)
        response = self.client.post('/api/identity/refresh')
        self.assertEqual(response.status_code, 200)
        self.assertIn('access_token', response.cookies)

    def test_refresh_rejects_access_token(self):
        self.client.cookies['refresh_token'] = create_access_token(self.user.id)
        response = self.client.post('/api/identity/refresh')
        self.assertEqual(response.status_code, 401)

    def test_logout_clears_cookies(self):
        response = self.client.post('/api/identity/logout')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.cookies['access_token'].value, '')


class OnboardingAPITest(TestCase):
    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username="onboard", password="pw")
        self.client.force_login(self.user)

    def _payload(self, **overrides):
        payload = {
            'interests': ['writing', 'fitness', 'cooking'],
            'life_goal': 'Finish my novel',
            'daily_free_time': 2,
            'age': 30,
            'gender': 'prefer-not-to-say',
        }
        payload.update(overrides)
        return payload

    def test_onboarding_saves_profile(self):
        response = self.client.post(
            '/api/identity/onboarding',
            data=json.dumps(self._payload()),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertTrue(self.user.onboarding_completed)
        self.assertEqual(self.user.interests, ['writing', 'fitness', 'cooking'])

    def test_onboarding_requires_three_interests(self):
        response = self.client.post(
            '/api/identity/onboarding',
            data=json.dumps(self._payload(interests=['writing'])),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 422)

    def test_onboarding_rejects_young_age(self):
        response = self.client.post(
            '/api/identity/onboarding',
            data=json.dumps(self._payload(age=10)),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 422)

    def test_onboarding_rejects_unknown_gender(self):
        response = self.client.post(
            '/api/identity/onboarding',
            data=json.dumps(self._payload(gender='robot')),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 422)
