"""Business rules shared by the API routers."""
