# src/order_shipping_manifest/rules/lookups.py
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# Romanized prefecture name (as the storefront stores it, macrons included)
# -> local-script name used on carrier manifests.
REGION_NAMES: Mapping[str, str] = MappingProxyType({
    "Aichi": "愛知県",
    "Akita": "秋田県",
    "Aomori": "青森県",
    "Chiba": "千葉県",
    "Ehime": "愛媛県",
    "Fukui": "福井県",
    "Fukuoka": "福岡県",
    "Fukushima": "福島県",
    "Gifu": "岐阜県",
    "Gunma": "群馬県",
    "Hiroshima": "広島県",
    "Hokkaidō": "北海道",
    "Hyōgo": "兵庫県",
    "Ibaraki": "茨城県",
    "Ishikawa": "石川県",
    "Iwate": "岩手県",
    "Kagawa": "香川県",
    "Kagoshima": "鹿児島県",
    "Kanagawa": "神奈川県",
    "Kōchi": "高知県",
    "Kumamoto": "熊本県",
    "Kyōto": "京都府",
    "Mie": "三重県",
    "Miyagi": "宮城県",
    "Miyazaki": "宮崎県",
    "Nagano": "長野県",
    "Nagasaki": "長崎県",
    "Nara": "奈良県",
    "Niigata": "新潟県",
    "Ōita": "大分県",
    "Okayama": "岡山県",
    "Okinawa": "沖縄県",
    "Ōsaka": "大阪府",
    "Saga": "佐賀県",
    "Saitama": "埼玉県",
    "Shiga": "滋賀県",
    "Shimane": "島根県",
    "Shizuoka": "静岡県",
    "Tochigi": "栃木県",
    "Tokushima": "徳島県",
    "Tōkyō": "東京都",
    "Tottori": "鳥取県",
    "Toyama": "富山県",
    "Wakayama": "和歌山県",
    "Yamagata": "山形県",
    "Yamaguchi": "山口県",
    "Yamanashi": "山梨県",
})

# Free-text delivery band (checkout attribute) -> carrier time-window code.
# Japanese and English labels of the same band map to the same code.
DELIVERY_WINDOWS: Mapping[str, str] = MappingProxyType({
    "午前中（12時まで）": "0812",
    "before-noon": "0812",
    "14-16": "1416",
    "16-18": "1618",
    "18-20": "1820",
    "19-21": "1921",
})

# Custom attribute keys written by the checkout delivery-date app
REQUESTED_DATE_ATTRIBUTE = "shipandco-配達希望日"
DELIVERY_WINDOW_ATTRIBUTE = "shipandco-配達希望時間帯"

# Yamato invoice (送り状) types accepted for Yamato manifest column 2
INVOICE_TYPES: Mapping[str, str] = MappingProxyType({
    "0": "発払い",
    "2": "コレクト",
    "3": "クロネコゆうメール",
    "4": "タイム",
    "5": "着払い",
    "6": "発払い（複数口）",
    "7": "ネコポス・クロネコゆうパケット",
    "8": "宅急便コンパクト",
    "9": "宅急便コンパクトコレクト",
    "A": "ネコポス（1月末にてサービス終了）",
})
