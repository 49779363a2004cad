"""ABI fragments for the two contracts the backend talks to."""

ROYALTY_SPLITTER_ABI = [
    {
        "type": "function",
        "name": "registerRemix",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "remixId", "type": "string"},
            {"name": "creator", "type": "address"},
            {
                "name": "splits",
                "type": "tuple[]",
                "components": [
                    {"name": "recipient", "type": "address"},
                    {"name": "basisPoints", "type": "uint256"},
                ],
            },
        ],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "splitRoyalties",
        "stateMutability": "payable",
        "inputs": [{"name": "remixId", "type": "string"}],
        "outputs": [],
    },
]

REMIX_PROVENANCE_ABI = [
    {
        "type": "function",
        "name": "mintRemix",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "creator", "type": "address"},
            {"name": "originalContentHash", "type": "string"},
            {"name": "remixContentHash", "type": "string"},
            {"name": "transformation", "type": "string"},
            {"name": "tokenURI", "type": "string"},
        ],
        "outputs": [{"name": "tokenId", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "getRemixesByOriginalContent",
        "stateMutability": "view",
        "inputs": [{"name": "originalContentHash", "type": "string"}],
        "outputs": [{"name": "tokenIds", "type": "uint256[]"}],
    },
    {
        "type": "function",
        "name": "getProvenance",
        "stateMutability": "view",
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "outputs": [
            {"name": "creator", "type": "address"},
            {"name": "originalContentHash", "type": "string"},
            {"name": "remixContentHash", "type": "string"},
            {"name": "transformation", "type": "string"},
        ],
    },
    {
        "type": "function",
        "name": "tokenURI",
        "stateMutability": "view",
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "tokenId", "type": "uint256", "indexed": True},
        ],
    },
]
