import os
import concurrent.futures

from release_config import usage
from release_info import resolve, build_asset_set
from download_asset import download_asset
from sign_asset import check_gpg, sign_and_verify
from upload_asset import upload_asset

def run_batch(func, items):
    # First failure wins; members not yet started are cancelled and the
    # others are not waited for.
    items = list(items)
    if not items:
        return []
    pool = concurrent.futures.ThreadPoolExecutor(max_workers=min(len(items), 8))
    futures = [pool.submit(func, item) for item in items]
    try:
        for f in concurrent.futures.as_completed(futures):
            f.result()
    finally:
        pool.shutdown(wait=False, cancel_futures=True)
    return [f.result() for f in futures]

def download_all(config, assets):
    def download(asset):
        path = download_asset(config, asset)
        print (f'{asset["name"]} ... downloaded')
        return path
    return run_batch(download, assets)

def upload_all(config, release_id, sig_paths):
    def upload(path):
        upload_asset(config, release_id, path)
        print (f'{os.path.basename(path)} ... uploaded')
    run_batch(upload, sig_paths)

def sign_release(config):
    gpg = check_gpg(config)

    release = resolve(config)
    print (f'Release {config["tag"]} ({release["id"]}) has {len(release["assets"])} assets')
    assets = build_asset_set(release, config['tag'], config['repo'], config['owner'],
                             config['server_url'])

    os.makedirs(config['workdir'], exist_ok=True)
    paths = download_all(config, assets)

    sig_paths = []
    for path in paths:
        sig_paths.append(sign_and_verify(gpg, config, path))
        print (f'{os.path.basename(path)} ... signed')

    upload_all(config, release['id'], sig_paths)
    return [os.path.basename(p) for p in sig_paths]

def in_github_actions(environ):
    return environ.get('GITHUB_ACTIONS') == 'true'

def main(environ=None):
    if environ is None:
        environ = os.environ
    config = usage(environ)

    actions = in_github_actions(environ)
    if actions and config['passphrase']:
        print (f'::add-mask::{config["passphrase"]}')

    try:
        uploaded = sign_release(config)
    except SystemExit as e:
        if actions and isinstance(e.code, str):
            print ('::error::' + e.code.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A'))
        raise
    print (f'Signed {len(uploaded)} assets of {config["owner"]}/{config["repo"]} {config["tag"]}')

if __name__ == "__main__":
    main()
