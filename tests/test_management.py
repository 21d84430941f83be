"""
Tests for services, stocks, vendors and employees
"""
import pytest

from app import catalog, employees as emp, inventory, vendors as vnd
from app.validators import ValidationError


@pytest.mark.unit
class TestServices:
    """Tests for the service catalogue"""

    def test_add_service(self, store, fake_client):
        """Test a service row is normalised"""
        catalog.add_service(store, {"name": " Deep Cleaning ", "price": "2500", "description": "  ",
                                    "duration_hours": ""})
        row = fake_client.tables["services"][0]
        assert row == {"name": "Deep Cleaning", "description": None, "price": 2500.0,
                       "duration_hours": None, "status": "Active", "id": "services-1"}

    def test_negative_price(self, store):
        """Test negative prices are rejected"""
        with pytest.raises(ValidationError):
            catalog.add_service(store, {"name": "X", "price": -1})

    def test_active_only(self, fake_client, store):
        """Test the booking site only sees active services"""
        fake_client.tables["services"] = [
            {"id": "1", "name": "B", "status": "Active"},
            {"id": "2", "name": "A", "status": "Inactive"},
            {"id": "3", "name": "A2", "status": "Active"},
        ]
        assert [s["id"] for s in catalog.fetch_services(store, active_only=True)] == ["3", "1"]
        assert len(catalog.fetch_services(store)) == 3

    def test_service_label(self):
        """Test label shows the formatted price"""
        assert catalog.service_label({"name": "Deep Cleaning", "price": 12500}) == "Deep Cleaning - ₹12,500"


@pytest.mark.unit
class TestStocks:
    """Tests for stock items"""

    ITEM = {"item_name": "Floor cleaner", "category": "Chemicals", "unit": "litres",
            "quantity": 4, "minimum_stock": 5, "cost_per_unit": 150}

    def test_total_value_computed(self, store, fake_client):
        """Test total value is quantity times cost"""
        inventory.add_stock(store, self.ITEM)
        assert fake_client.tables["stocks"][0]["total_value"] == 600

    def test_negative_quantity(self, store):
        """Test negative quantities are rejected"""
        with pytest.raises(ValidationError):
            inventory.add_stock(store, dict(self.ITEM, quantity=-1))

    def test_low_stock(self):
        """Test at or below minimum counts as low"""
        items = [
            {"quantity": 4, "minimum_stock": 5},
            {"quantity": 5, "minimum_stock": 5},
            {"quantity": 6, "minimum_stock": 5},
        ]
        assert len(inventory.low_stock_items(items)) == 2

    def test_total_stock_value(self):
        """Test value sums with missing values as zero"""
        assert inventory.total_stock_value([{"total_value": 600}, {"total_value": None}, {}]) == 600

    def test_update_and_delete(self, store, fake_client):
        """Test update recomputes value and delete removes the row"""
        inventory.add_stock(store, self.ITEM)
        stock_id = fake_client.tables["stocks"][0]["id"]
        inventory.update_stock(store, stock_id, dict(self.ITEM, quantity=10))
        assert fake_client.tables["stocks"][0]["total_value"] == 1500
        inventory.delete_stock(store, stock_id)
        assert fake_client.tables["stocks"] == []


@pytest.mark.unit
class TestVendors:
    """Tests for vendors"""

    def test_services_split(self, store, fake_client):
        """Test comma separated services become a list"""
        vnd.add_vendor(store, {"name": "CleanCo", "services_provided": "Chemicals, Mops,, ", "rating": 4})
        row = fake_client.tables["vendors"][0]
        assert row["services_provided"] == ["Chemicals", "Mops"]
        assert row["email"] is None

    def test_rating_range(self, store):
        """Test ratings outside 0-5 are rejected"""
        with pytest.raises(ValidationError):
            vnd.add_vendor(store, {"name": "CleanCo", "rating": 6})

    def test_bad_email(self, store):
        """Test an optional email must still be valid"""
        with pytest.raises(ValidationError):
            vnd.add_vendor(store, {"name": "CleanCo", "email": "not-an-email"})

    def test_stats(self):
        """Test active count and average rating"""
        vendors = [{"status": "Active", "rating": 4}, {"status": "Inactive", "rating": 3.5}, {"status": "Active"}]
        assert len(vnd.active_vendors(vendors)) == 2
        assert vnd.average_rating(vendors) == 2.5
        assert vnd.average_rating([]) == 0.0


@pytest.mark.unit
class TestEmployees:
    """Tests for employees"""

    EMPLOYEE = {"name": "Asha", "department": "Cleaning", "position": "Supervisor",
                "email": "asha@example.com", "phone_number": "+91 98765 43210", "salary": "25000",
                "hire_date": "2024-01-15", "employment_type": "full-time"}

    def test_add_employee(self, store, fake_client):
        """Test an employee row is normalised"""
        emp.add_employee(store, self.EMPLOYEE)
        row = fake_client.tables["employees"][0]
        assert row["salary"] == 25000
        assert row["hire_date"] == "2024-01-15"
        assert row["status"] == "Active"

    def test_bad_phone(self, store):
        """Test short phone numbers are rejected"""
        with pytest.raises(ValidationError) as exc:
            emp.add_employee(store, dict(self.EMPLOYEE, phone_number="123"))
        assert exc.value.field == "phone_number"

    def test_bad_employment_type(self, store):
        """Test employment type must be known"""
        with pytest.raises(ValidationError):
            emp.add_employee(store, dict(self.EMPLOYEE, employment_type="contract"))

    def test_headcount(self):
        """Test headcount splits active staff by employment type"""
        counts = emp.headcount([
            {"status": "Active", "employment_type": "full-time"},
            {"status": "Active", "employment_type": "part-time"},
            {"status": "Active", "employment_type": "full-time"},
            {"status": "Inactive", "employment_type": "full-time"},
        ])
        assert (counts.active, counts.inactive, counts.full_time, counts.part_time) == (3, 1, 2, 1)

    def test_search(self):
        """Test search over name, department and position"""
        staff = [{"name": "Asha", "department": "Cleaning", "position": "Supervisor"},
                 {"name": "Ravi", "department": "Accounts", "position": "Clerk"}]
        assert [e["name"] for e in emp.search_employees(staff, "accounts")] == ["Ravi"]
        assert len(emp.search_employees(staff, "")) == 2

    def test_fetch_active_employees(self, fake_client, store):
        """Test only active staff can be picked for a job, by name"""
        fake_client.tables["employees"] = [
            {"id": "e1", "name": "Ravi", "status": "Active"},
            {"id": "e2", "name": "Meera", "status": "Inactive"},
            {"id": "e3", "name": "Asha", "status": "Active"},
        ]
        assert [e["id"] for e in emp.fetch_active_employees(store)] == ["e3", "e1"]
        assert fake_client.calls[0].columns == "id, name, department, status"
