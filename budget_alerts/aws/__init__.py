"""AWS integration: sessions, pagination and org discovery."""
