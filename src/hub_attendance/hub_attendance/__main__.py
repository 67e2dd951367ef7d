from .main import create_app


def main() -> None:
    app = create_app()
    # Streaming observers each hold a request thread open.
    app.run(host="0.0.0.0", port=5000, threaded=True)


if __name__ == "__main__":
    main()
