"""Domain registry: cardinality cap, core protection, lifecycle."""

from backend.features.domains.service import DomainRegistry, DomainService, default_domains
from backend.models.domain import MAX_ACTIVE_DOMAINS, MicroAction


def fill_to_cap(registry: DomainRegistry) -> list:
    added = []
    while registry.can_add():
        added.append(registry.add_domain(name=f"D{len(added)}", icon="🎨"))
    return added


class TestDefaults:
    def test_three_core_domains(self):
        registry = DomainRegistry()
        assert registry.active_ids() == ["health", "faith", "career"]
        assert all(d.is_core and d.xp_enabled for d in registry.active_domains())

    def test_missing_core_domains_restored(self):
        registry = DomainRegistry(domains=[default_domains()[0]])
        assert set(registry.active_ids()) == {"health", "faith", "career"}


class TestAdd:
    def test_add_custom_domain(self):
        registry = DomainRegistry()
        domain = registry.add_domain(name="Art", icon="🎨", intention="Make things")
        assert domain.id == "custom_1"
        assert domain.is_core is False
        assert domain.xp_enabled is False
        assert [i.id for i in domain.items] == ["default"]
        assert domain.items[0].label == "Did something"

    def test_custom_ids_increment(self):
        registry = DomainRegistry()
        first = registry.add_domain(name="A", icon="a")
        second = registry.add_domain(name="B", icon="b")
        assert (first.id, second.id) == ("custom_1", "custom_2")

    def test_sixth_domain_rejected(self):
        registry = DomainRegistry()
        fill_to_cap(registry)
        assert registry.active_count() == MAX_ACTIVE_DOMAINS
        assert registry.add_domain(name="Too many", icon="x") is None
        assert registry.active_count() == MAX_ACTIVE_DOMAINS

    def test_items_kept(self):
        registry = DomainRegistry()
        domain = registry.add_domain(name="Art", icon="🎨", items=[MicroAction("sketch", "Sketch")])
        assert domain.item_ids() == ["sketch"]


class TestLifecycle:
    def test_archive_core_rejected(self):
        registry = DomainRegistry()
        assert registry.archive_domain("health") is False
        assert "health" in registry.active_ids()

    def test_archive_unknown_rejected(self):
        assert DomainRegistry().archive_domain("nope") is False

    def test_archive_and_restore(self):
        registry = DomainRegistry()
        domain = registry.add_domain(name="Art", icon="🎨")
        assert registry.archive_domain(domain.id) is True
        assert domain.id not in registry.active_ids()
        assert [d.id for d in registry.archived_domains()] == [domain.id]
        assert registry.restore_domain(domain.id) is True
        assert domain.id in registry.active_ids()

    def test_restore_blocked_at_cap(self):
        registry = DomainRegistry()
        first = registry.add_domain(name="A", icon="a")
        registry.archive_domain(first.id)
        fill_to_cap(registry)
        assert registry.restore_domain(first.id) is False
        assert registry.get_domain(first.id).archived is True

    def test_restore_active_rejected(self):
        registry = DomainRegistry()
        domain = registry.add_domain(name="A", icon="a")
        assert registry.restore_domain(domain.id) is False

    def test_delete_requires_archive(self):
        registry = DomainRegistry()
        domain = registry.add_domain(name="A", icon="a")
        assert registry.delete_domain(domain.id) is False
        registry.archive_domain(domain.id)
        assert registry.delete_domain(domain.id) is True
        assert registry.get_domain(domain.id) is None

    def test_delete_core_rejected(self):
        registry = DomainRegistry()
        assert registry.delete_domain("faith") is False
        assert registry.get_domain("faith") is not None

    def test_archive_frees_a_slot(self):
        registry = DomainRegistry()
        added = fill_to_cap(registry)
        registry.archive_domain(added[0].id)
        assert registry.can_add() is True


class TestUpdates:
    def test_update_fields(self):
        registry = DomainRegistry()
        assert registry.update_domain("health", name="Body", color="#000000") is True
        domain = registry.get_domain("health")
        assert domain.name == "Body"
        assert domain.color == "#000000"
        assert domain.icon == "💪"

    def test_update_unknown(self):
        assert DomainRegistry().update_domain("nope", name="x") is False

    def test_toggle_xp_feeds_xp_values(self):
        registry = DomainRegistry()
        domain = registry.add_domain(name="Art", icon="🎨")
        assert registry.xp_values() == {domain.id: 0}
        assert registry.toggle_xp(domain.id) is True
        assert registry.xp_values() == {}
        assert registry.toggle_xp("nope") is None

    def test_update_items(self):
        registry = DomainRegistry()
        registry.update_items("career", [MicroAction("code", "Write code")])
        assert registry.get_domain("career").item_ids() == ["code"]


class TestDomainService:
    def test_registries_are_per_user(self):
        service = DomainService()
        service.registry("a").add_domain(name="Art", icon="🎨")
        assert len(service.registry("a").active_ids()) == 4
        assert len(service.registry("b").active_ids()) == 3

    def test_snapshot_is_a_copy(self):
        service = DomainService()
        snapshot = service.snapshot("a")
        snapshot[0].name = "changed"
        assert service.registry("a").get_domain("health").name == "Health"
