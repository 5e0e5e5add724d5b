import os
import requests

from release_info import api_headers

CHUNK_SIZE = 1024 * 1024

def asset_path(config, asset):
    return os.path.join(config['workdir'], asset['name'])

def download_asset(config, asset):
    name = asset['name']
    path = asset_path(config, asset)
    try:
        with requests.get(asset['download_url'], headers=api_headers(config),
                          allow_redirects=True, stream=True) as r:
            if r.status_code != 200:
                raise SystemExit(f'Failed to download asset {name}: {r.status_code}')
            with open(path, 'wb') as stream:
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                    stream.write(chunk)
    except requests.RequestException as e:
        raise SystemExit(f'Failed to download asset {name}: {e}')
    except OSError as e:
        raise SystemExit(f'Failed to write asset {name}: {e}')
    return path
