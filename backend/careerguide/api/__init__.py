"""HTTP routers. Each module owns one resource group; `careerguide.main` mounts them."""
