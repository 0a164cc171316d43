from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    # id, username, email, password, is_active, is_staff, is_superuser are inherited
    firstname = models.CharField(max_length=100)
    lastname = models.CharField(max_length=100)
    phone = models.CharField(max_length=50, blank=True, null=True)
    email = models.EmailField(unique=True)

    def __str__(self):
        return self.username

    @property
    def is_customer(self) -> bool:
        """Staff and admin accounts browse the storefront but do not own carts."""
        return not (self.is_staff or self.is_superuser)
