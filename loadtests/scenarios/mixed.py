"""Mixed marketplace workload scenario.

Combines vendor and buyer journeys with weights that model a lunchtime
rush. This is the recommended scenario for load baseline testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.ordering import CancellationJourney, CartBrowsingJourney, CheckoutAndPayJourney
from loadtests.scenarios.vendors import VendorOnboardingJourney


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload.

    Buyers (85%):
    - Checkout and pay: the happy path, most common
    - Cart browsing: adding, changing and abandoning
    - Cancellation: unpaid orders cancelled by the buyer

    Vendors (15%):
    - Onboarding: registering and stocking a menu
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        CheckoutAndPayJourney: 10,
        CartBrowsingJourney: 6,
        CancellationJourney: 1,
        VendorOnboardingJourney: 3,
    }
