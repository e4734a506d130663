from unittest.mock import patch
from django.test import TestCase, Client, override_settings

from apps.identity.models import User, SubscriptionStatus
from . import services


class FakeStripeError(Exception):
    pass


@override_settings(STRIPE_SECRET_KEY='sk_test_123', STRIPE_PRICE_ID='price_123')
class SubscriptionServiceTest(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(
            username='payer', email='payer@test.com', password='pw',
            first_name='Pat', last_name='Payer',
        )
        patcher = patch('apps.billing.services.stripe')
        self.stripe = patcher.start()
        self.addCleanup(patcher.stop)
        self.stripe.StripeError = FakeStripeError

    def test_creates_customer_and_subscription(self):
        self.stripe.Customer.create.return_value = {'id': 'cus_1'}
        self.stripe.Subscription.create.return_value = {
            'id': 'sub_1',
            'latest_invoice': {'payment_intent': {'client_secret': 'pi_secret'}},
        }

        result = services.get_or_create_subscription(self.user)

        self.assertEqual(result.subscription_id, 'sub_1')
        self.assertEqual(result.client_secret, 'pi_secret')
        self.stripe.Customer.create.assert_called_once_with(email='payer@test.com', name='Pat Payer')
        self.assertEqual(
            self.stripe.Subscription.create.call_args[1]['items'],
            [{'price': 'price_123'}],
        )

        self.user.refresh_from_db()
        self.assertEqual(self.user.stripe_customer_id, 'cus_1')
        self.assertEqual(self.user.stripe_subscription_id, 'sub_1')
        self.assertEqual(self.user.subscription_status, SubscriptionStatus.ACTIVE)

    def test_returns_existing_subscription(self):
        self.user.stripe_subscription_id = 'sub_existing'
        self.user.save()
        self.stripe.Subscription.retrieve.return_value = {'id': 'sub_existing', 'latest_invoice': 'in_1'}
        self.stripe.Invoice.retrieve.return_value = {'payment_intent': {'client_secret': 'existing_secret'}}

        result = services.get_or_create_subscription(self.user)

        self.assertEqual(result.subscription_id, 'sub_existing')
        self.assertEqual(result.client_secret, 'existing_secret')
        self.stripe.Subscription.create.assert_not_called()

    def test_unretrievable_subscription_creates_a_new_one(self):
        self.user.stripe_subscription_id = 'sub_gone'
        self.user.stripe_customer_id = 'cus_kept'
        self.user.save()
        self.stripe.Subscription.retrieve.side_effect = FakeStripeError("No such subscription")
        self.stripe.Subscription.create.return_value = {'id': 'sub_new', 'latest_invoice': None}

        result = services.get_or_create_subscription(self.user)

        self.assertEqual(result.subscription_id, 'sub_new')
        self.assertIsNone(result.client_secret)
        self.stripe.Customer.create.assert_not_called()

    def test_user_without_email(self):
        self.user.email = ''
        self.user.save()
        with self.assertRaises(ValueError):
            services.get_or_create_subscription(self.user)

    def test_stripe_error_becomes_value_error(self):
        self.stripe.Customer.create.side_effect = FakeStripeError("Card declined")
        with self.assertRaisesMessage(ValueError, "Card declined"):
            services.get_or_create_subscription(self.user)

    @override_settings(STRIPE_SECRET_KEY='')
    def test_not_configured(self):
        with self.assertRaises(services.BillingNotConfiguredError):
            services.get_or_create_subscription(self.user)


class SubscriptionAPITest(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username='api_payer', email='p@test.com', password='pw')

    def test_requires_auth(self):
        self.assertEqual(self.client.post('/api/billing/subscription').status_code, 401)

    @override_settings(STRIPE_SECRET_KEY='')
    def test_not_configured_is_503(self):
        self.client.force_login(self.user)
        self.assertEqual(self.client.post('/api/billing/subscription').status_code, 503)
