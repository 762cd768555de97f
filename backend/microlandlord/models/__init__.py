from .plans import Plan
from .subscriptions import Subscription
from .feature_entitlements import FeatureEntitlement
from .properties import Property
