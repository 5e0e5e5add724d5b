import re
import requests

VERSION_PATTERN = re.compile(r'\d+\.\d+\.\d+')

def api_headers(config):
    return {
        'Accept': 'application/vnd.github+json',
        'Authorization': f'Bearer {config["token"]}',
        'X-GitHub-Api-Version': '2022-11-28',
    }

def api_get(config, url, what):
    try:
        r = requests.get(url, headers=api_headers(config))
    except requests.RequestException as e:
        raise SystemExit(f'Failed to get {what}: {e}')
    if r.status_code != 200:
        raise SystemExit(f'Failed to get {what}: {r.status_code}\n{r.text}')
    return r.json()

def get_release_info(config):
    url = f'{config["api_url"]}/repos/{config["owner"]}/{config["repo"]}/releases/tags/{config["tag"]}'
    return api_get(config, url, 'GitHub release information')

def get_assets(data):
    return [{'name': a['name'], 'download_url': a['browser_download_url']} for a in data]

def get_asset_list(config, release_id):
    url = f'{config["api_url"]}/repos/{config["owner"]}/{config["repo"]}/releases/{release_id}/assets'
    return get_assets(api_get(config, url, 'GitHub release assets'))

def resolve(config):
    info = get_release_info(config)
    return {'id': info['id'], 'assets': get_assets(info['assets'])}

def get_version(tag):
    m = VERSION_PATTERN.search(tag)
    if m is None:
        raise SystemExit(f'Tag did not match expected version format: {tag}')
    return m.group(0)

def build_asset_set(release, tag, repo, owner, server_url='https://github.com'):
    version = get_version(tag)
    archive_url = f'{server_url}/{owner}/{repo}/archive/refs/tags/{tag}'

    assets = list(release['assets'])
    names = {a['name'] for a in assets}
    for ext in ('tar.gz', 'zip'):
        name = f'{repo}-{version}.{ext}'
        if name in names:
            raise SystemExit(f'Asset name collision: {name} is already attached to release {tag}')
        assets.append({'name': name, 'download_url': f'{archive_url}.{ext}'})
    return assets
