# fortune_kline/utils/__init__.py
# Fixed constant tables. See fortune_kline.utils.constants.
