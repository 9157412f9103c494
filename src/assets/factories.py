"""Factory Boy factories for AssetDesk test data generation."""

import factory
from factory.django import DjangoModelFactory


class UserFactory(DjangoModelFactory):
    """Factory for the auth User model."""

    class Meta:
        model = "auth.User"
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    first_name = factory.Faker("first_name")
    is_active = True

    @factory.post_generation
    def password(self, create, extracted, **kwargs):
        pwd = extracted or "testpass123!"
        self.set_password(pwd)
        if create:
            self.save(update_fields=["password"])


class AssetFactory(DjangoModelFactory):
    """Factory for Asset model.

    ``asset_id`` follows a sequence; leave it blank explicitly to get
    the model's generated ``AST...`` identifier.
    """

    class Meta:
        model = "assets.Asset"

    asset_id = factory.Sequence(lambda n: f"AST{n:04d}")
    name = factory.Sequence(lambda n: f"Asset {n}")
    category = "IT Equipment"
    status = "Active"
    location = "Head Office"
    assigned_to = ""


class AssetHistoryFactory(DjangoModelFactory):
    class Meta:
        model = "assets.AssetHistory"

    asset = factory.SubFactory(AssetFactory)
    action = "Asset Created"
    details = factory.LazyAttribute(
        lambda o: f'Asset "{o.asset.name}" was created'
    )
