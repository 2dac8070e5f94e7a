from src.attendance_register.attendance_register.main import create_app

app = create_app()


if __name__ == "__main__":
    # Single-threaded on purpose: the register has no locking.
    app.run(debug=app.config["DEBUG"], threaded=False)
