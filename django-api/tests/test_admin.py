"""Tests for the Django admin registrations.

Run with: pytest tests/test_admin.py -v
"""

import pytest
from django.contrib import admin
from django.test import RequestFactory

from bookings import models

LOCK_FIELDS = {"status", "locked_until", "consecutive_absences", "total_absences"}


@pytest.mark.django_db
class TestUserAdmin:
    """Staff can see reliability state but not edit it."""

    def test_lock_fields_are_read_only(self):
        model_admin = admin.site.get_model_admin(models.User)
        assert LOCK_FIELDS <= set(model_admin.get_readonly_fields(None))

    def test_change_form_has_no_lock_inputs(self, make_user):
        user = make_user(status="locked", consecutive_absences=3)
        model_admin = admin.site.get_model_admin(models.User)

        form_class = model_admin.get_form(RequestFactory().get("/admin/"), user)

        assert "name" in form_class.base_fields
        assert not LOCK_FIELDS & set(form_class.base_fields)
        assert "password" not in form_class.base_fields


@pytest.mark.django_db
class TestEventAdmin:
    def test_total_capacity_is_fixed_after_creation(self, event):
        model_admin = admin.site.get_model_admin(models.Event)

        assert "total_capacity" not in model_admin.get_readonly_fields(None)
        assert "total_capacity" in model_admin.get_readonly_fields(None, event)
