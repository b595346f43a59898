from kafka_topics.cli import run

if __name__ == "__main__":
    run()
