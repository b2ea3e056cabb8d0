from cloudflare_exporter.main import run

if __name__ == "__main__":
    run()
