from sentence_breaker.cli import run

if __name__ == "__main__":
    run()
