"""Run the development server: ``python -m product_manager``."""
from product_manager import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=app.config["PORT"])
