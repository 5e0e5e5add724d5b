import os
import requests

from release_info import api_headers

def upload_url(config, release_id):
    return f'{config["uploads_url"]}/repos/{config["owner"]}/{config["repo"]}/releases/{release_id}/assets'

def upload_asset(config, release_id, path):
    name = os.path.basename(path)
    headers = dict(api_headers(config), **{'Content-Type': 'application/octet-stream'})
    try:
        with open(path, 'rb') as stream:
            data = stream.read()
    except OSError as e:
        raise SystemExit(f'Failed to read {name}: {e}')

    try:
        r = requests.post(upload_url(config, release_id), params={'name': name},
                          data=data, headers=headers)
    except requests.RequestException as e:
        raise SystemExit(f'Failed to upload {name}: {e}')
    if r.status_code != 201:
        raise SystemExit(f'Failed to upload {name}: {r.status_code}\n{r.text}')
